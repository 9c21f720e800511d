from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Tuple

Row = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class PatientDocument:
    document_name: Optional[str]
    document_type: Optional[str]
    document_url: Optional[str]


@dataclass(frozen=True, slots=True)
class PatientCondition:
    condition_name: Optional[str]
    diagnosed_on: Any
    condition_status: Optional[str]
    notes: Optional[str]


@dataclass(frozen=True, slots=True)
class PatientAllergy:
    allergen: Optional[str]
    severity: Optional[str]
    reaction_notes: Optional[str]


@dataclass(frozen=True, slots=True)
class PatientProfile:
    patient_id: int
    full_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    relationship: Optional[str]
    date_of_birth: Any
    gender: Optional[str]
    blood_group: Optional[str]
    profile_image_url: Optional[str]
    created_at: Any
    documents: Tuple[PatientDocument, ...] = ()
    conditions: Tuple[PatientCondition, ...] = ()
    allergies: Tuple[PatientAllergy, ...] = ()


def new_patient(row: Row) -> PatientProfile:
    return PatientProfile(
        patient_id=row["patient_id"],
        full_name=row["full_name"],
        email=row["email"],
        phone=row["phone"],
        relationship=row["relationship"],
        date_of_birth=row["date_of_birth"],
        gender=row["gender"],
        blood_group=row["blood_group"],
        profile_image_url=row["profile_image_url"],
        created_at=row["created_at"],
    )


# Satellite rows are plain value records with no surrogate id in the payload;
# each row is its own entry, in table order.

def add_document(patient: PatientProfile, row: Row) -> PatientProfile:
    document = PatientDocument(
        document_name=row["document_name"],
        document_type=row["document_type"],
        document_url=row["document_url"],
    )
    return replace(patient, documents=patient.documents + (document,))


def add_condition(patient: PatientProfile, row: Row) -> PatientProfile:
    condition = PatientCondition(
        condition_name=row["condition_name"],
        diagnosed_on=row["diagnosed_on"],
        condition_status=row["condition_status"],
        notes=row["notes"],
    )
    return replace(patient, conditions=patient.conditions + (condition,))


def add_allergy(patient: PatientProfile, row: Row) -> PatientProfile:
    allergy = PatientAllergy(
        allergen=row["allergen"],
        severity=row["severity"],
        reaction_notes=row["reaction_notes"],
    )
    return replace(patient, allergies=patient.allergies + (allergy,))
