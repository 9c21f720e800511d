from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Tuple

from src.shared.aggregation import (
    append_unique,
    as_bool,
    as_optional_bool,
    by_fields,
    by_id,
    upsert_unique,
)

Row = Mapping[str, Any]


# ───────────────────────── Workplace aggregate ─────────────────────────

@dataclass(frozen=True, slots=True)
class Specialization:
    id: Optional[int]
    name: Optional[str]


@dataclass(frozen=True, slots=True)
class Schedule:
    id: int
    day_of_week: Optional[str]
    start_time: Any
    end_time: Any
    consultation_mode: Optional[str]
    is_active: bool


@dataclass(frozen=True, slots=True)
class Practice:
    id: int
    clinic_id: Optional[int]
    hospital_department_id: Optional[int]
    consultation_fee: Any
    is_primary: bool
    practice_type: Optional[str]
    notes: Optional[str]


@dataclass(frozen=True, slots=True)
class ClinicWorkplace:
    id: int
    name: Optional[str]
    address: Optional[str]
    postal_code: Optional[str]
    city_id: Optional[int]
    practice_type: Optional[str]
    is_primary: bool
    schedules: Tuple[Schedule, ...] = ()


@dataclass(frozen=True, slots=True)
class Department:
    id: Optional[int]
    floor: Optional[str]
    description: Optional[str]


@dataclass(frozen=True, slots=True)
class HospitalWorkplace:
    hospital_id: int
    name: Optional[str]
    hospital_type: Optional[str]
    address: Optional[str]
    postal_code: Optional[str]
    city_id: Optional[int]
    department: Department
    practice_type: Optional[str]
    is_primary: bool
    schedules: Tuple[Schedule, ...] = ()


@dataclass(frozen=True, slots=True)
class Qualification:
    degree_name: Optional[str]
    institution: Optional[str]
    completion_year: Any

    def describe(self) -> str:
        return f"{self.degree_name} from {self.institution} ({self.completion_year})"


@dataclass(frozen=True, slots=True)
class VerificationDocument:
    document_type: Optional[str]
    document_url: Optional[str]
    status: Optional[str]
    reviewed_by: Any
    remarks: Optional[str]


@dataclass(frozen=True, slots=True)
class DoctorWorkplaces:
    doctor_id: int
    full_name: Optional[str]
    specialization: Specialization
    qualifications: Tuple[Qualification, ...] = ()
    documents: Tuple[VerificationDocument, ...] = ()
    clinics: Tuple[ClinicWorkplace, ...] = ()
    hospitals: Tuple[HospitalWorkplace, ...] = ()
    practices: Tuple[Practice, ...] = ()


qualification_key = by_fields("degree_name", "institution", "completion_year")
document_key = by_fields("document_type", "document_url")


def hospital_key(hospital: HospitalWorkplace):
    # the same hospital is listed once per department
    return (hospital.hospital_id, hospital.department.id)


def new_doctor_workplaces(row: Row) -> DoctorWorkplaces:
    return DoctorWorkplaces(
        doctor_id=row["doctor_id"],
        full_name=row["full_name"],
        specialization=Specialization(id=row["specialization_id"], name=row["specialization_name"]),
    )


def _schedule(row: Row) -> Optional[Schedule]:
    if row["schedule_id"] is None:
        return None
    return Schedule(
        id=row["schedule_id"],
        day_of_week=row["day_of_week"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        consultation_mode=row["consultation_mode"],
        is_active=as_bool(row["is_active"]),
    )


def _practice(row: Row) -> Optional[Practice]:
    if row["doctor_practice_id"] is None:
        return None
    return Practice(
        id=row["doctor_practice_id"],
        clinic_id=row["clinic_id"],
        hospital_department_id=row["hospital_department_id"],
        consultation_fee=row["consultation_fee"],
        is_primary=as_bool(row["is_primary"]),
        practice_type=row["practice_type"],
        notes=row["notes"],
    )


def _clinic(row: Row, schedule: Optional[Schedule]) -> Optional[ClinicWorkplace]:
    if row["clinic_id"] is None:
        return None
    return ClinicWorkplace(
        id=row["clinic_id"],
        name=row["clinic_name"],
        address=row["clinic_address"],
        postal_code=row["clinic_postal_code"],
        city_id=row["clinic_city_id"],
        practice_type=row["practice_type"],
        is_primary=as_bool(row["is_primary"]),
        schedules=(schedule,) if schedule else (),
    )


def _hospital(row: Row, schedule: Optional[Schedule]) -> Optional[HospitalWorkplace]:
    if row["hospital_id"] is None:
        return None
    return HospitalWorkplace(
        hospital_id=row["hospital_id"],
        name=row["hospital_name"],
        hospital_type=row["hospital_type"],
        address=row["hospital_address"],
        postal_code=row["hospital_postal_code"],
        city_id=row["hospital_city_id"],
        department=Department(
            id=row["hospital_department_id"],
            floor=row["department_floor"],
            description=row["department_description"],
        ),
        practice_type=row["practice_type"],
        is_primary=as_bool(row["is_primary"]),
        schedules=(schedule,) if schedule else (),
    )


def fold_practice_row(doctor: DoctorWorkplaces, row: Row) -> DoctorWorkplaces:
    """One joined doctor/practice/clinic/hospital/schedule row into the doctor's workplaces."""
    schedule = _schedule(row)

    def with_schedule(place):
        return replace(place, schedules=append_unique(place.schedules, schedule, by_id))

    return replace(
        doctor,
        practices=append_unique(doctor.practices, _practice(row), by_id),
        clinics=upsert_unique(doctor.clinics, _clinic(row, schedule), by_id, with_schedule),
        hospitals=upsert_unique(doctor.hospitals, _hospital(row, schedule), hospital_key, with_schedule),
    )


def fold_qualification_row(doctor: DoctorWorkplaces, row: Row) -> DoctorWorkplaces:
    if row["degree_name"] is None:
        return doctor
    qualification = Qualification(
        degree_name=row["degree_name"],
        institution=row["institution"],
        completion_year=row["completion_year"],
    )
    return replace(doctor, qualifications=append_unique(doctor.qualifications, qualification, qualification_key))


def fold_document_row(doctor: DoctorWorkplaces, row: Row) -> DoctorWorkplaces:
    if row["document_type"] is None:
        return doctor
    document = VerificationDocument(
        document_type=row["document_type"],
        document_url=row["document_url"],
        status=row["status"],
        reviewed_by=row["reviewed_by"],
        remarks=row["remarks"],
    )
    return replace(doctor, documents=append_unique(doctor.documents, document, document_key))


# ───────────────────────── Verified doctor profile ─────────────────────────

@dataclass(frozen=True, slots=True)
class ScheduleSummary:
    day_of_week: Optional[str]
    start_time: Any
    end_time: Any
    consultation_mode: Optional[str]
    is_active: bool


@dataclass(frozen=True, slots=True)
class AvailabilitySlot:
    slot_start_time: Any
    slot_end_time: Any
    consultation_mode: Optional[str]
    slot_date: Any
    created_from_schedule_id: Optional[int]


@dataclass(frozen=True, slots=True)
class AppointmentSummary:
    id: int
    slot_id: Optional[int]
    patient_profile_id: Optional[int]
    status: Optional[str]
    consultation_type: Optional[str]
    patient_symptoms: Optional[str]
    channel_name: Optional[str]
    patient_name: Optional[str]


@dataclass(frozen=True, slots=True)
class DocumentRecord:
    id: int
    doctor_id: int
    document_type: Optional[str]
    document_url: Optional[str]
    public_id: Optional[str]
    status: Optional[str]
    reviewed_by: Any
    remarks: Optional[str]
    created_at: Any


@dataclass(frozen=True, slots=True)
class VerifiedDoctorProfile:
    doctor_id: int
    name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    bio: Optional[str]
    experience_years: Optional[int]
    languages_spoken: Optional[str]
    average_rating: Any
    total_reviews: Optional[int]
    is_verified: Optional[bool]
    profile_url: Optional[str]
    profile_img_public_id: Optional[str]
    address: Optional[str]
    postal_code: Optional[str]
    city: Optional[str]
    state: Optional[str]
    country: Optional[str]
    qualifications: Tuple[Qualification, ...] = ()
    schedules: Tuple[ScheduleSummary, ...] = ()
    availability_slots: Tuple[AvailabilitySlot, ...] = ()
    appointments: Tuple[AppointmentSummary, ...] = ()
    documents: Tuple[DocumentRecord, ...] = ()

    def qualification_text(self) -> str:
        return "; ".join(q.describe() for q in self.qualifications)


_PROFILE_FIELDS = (
    "doctor_id", "name", "email", "phone", "bio", "experience_years", "languages_spoken",
    "average_rating", "total_reviews", "profile_url", "profile_img_public_id",
    "address", "postal_code", "city", "state", "country",
)


def new_verified_profile(row: Row) -> VerifiedDoctorProfile:
    return VerifiedDoctorProfile(
        is_verified=as_optional_bool(row["is_verified"]),
        **{name: row[name] for name in _PROFILE_FIELDS},
    )


def add_profile_qualification(profile: VerifiedDoctorProfile, row: Row) -> VerifiedDoctorProfile:
    qualification = Qualification(
        degree_name=row["degree_name"],
        institution=row["institution"],
        completion_year=row["completion_year"],
    )
    return replace(profile, qualifications=append_unique(profile.qualifications, qualification, qualification_key))


def add_profile_schedule(profile: VerifiedDoctorProfile, row: Row) -> VerifiedDoctorProfile:
    schedule = ScheduleSummary(
        day_of_week=row["day_of_week"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        consultation_mode=row["consultation_mode"],
        is_active=as_bool(row["is_active"]),
    )
    return replace(profile, schedules=profile.schedules + (schedule,))


def add_profile_slot(profile: VerifiedDoctorProfile, row: Row) -> VerifiedDoctorProfile:
    slot = AvailabilitySlot(
        slot_start_time=row["slot_start_time"],
        slot_end_time=row["slot_end_time"],
        consultation_mode=row["consultation_mode"],
        slot_date=row["slot_date"],
        created_from_schedule_id=row["created_from_schedule_id"],
    )
    return replace(profile, availability_slots=profile.availability_slots + (slot,))


def add_profile_appointment(profile: VerifiedDoctorProfile, row: Row) -> VerifiedDoctorProfile:
    appointment = AppointmentSummary(
        id=row["id"],
        slot_id=row["slot_id"],
        patient_profile_id=row["patient_profile_id"],
        status=row["status"],
        consultation_type=row["consultation_type"],
        patient_symptoms=row["patient_symptoms"],
        channel_name=row["channel_name"],
        patient_name=row["patient_name"],
    )
    return replace(profile, appointments=append_unique(profile.appointments, appointment, by_id))


def add_profile_document(profile: VerifiedDoctorProfile, row: Row) -> VerifiedDoctorProfile:
    document = DocumentRecord(**{name: row[name] for name in DocumentRecord.__dataclass_fields__})
    return replace(profile, documents=append_unique(profile.documents, document, by_id))
