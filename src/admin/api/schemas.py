from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class MessageResponse(BaseModel):
    message: str


class HospitalResponse(BaseModel):
    id: int
    name: Optional[str] = None
    hospital_type: Optional[str] = None
    ownership: Optional[str] = None
    address_line: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    contact_number: Optional[str] = None
    website_url: Optional[str] = None
    bed_count: Optional[int] = None
    emergency_available: bool = False


class ClinicResponse(BaseModel):
    id: int
    name: Optional[str] = None
    address_line: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None


class ReviewResponse(BaseModel):
    rating: Any = None
    review_text: Optional[str] = None
    doctor_name: Optional[str] = None
    patient_name: Optional[str] = None


class PatientDocumentOut(BaseModel):
    document_name: Optional[str] = None
    document_type: Optional[str] = None
    document_url: Optional[str] = None


class PatientConditionOut(BaseModel):
    condition_name: Optional[str] = None
    diagnosed_on: Any = None
    condition_status: Optional[str] = None
    notes: Optional[str] = None


class PatientAllergyOut(BaseModel):
    allergen: Optional[str] = None
    severity: Optional[str] = None
    reaction_notes: Optional[str] = None


class PatientResponse(BaseModel):
    patient_id: int
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    relationship: Optional[str] = None
    date_of_birth: Any = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Any = None
    documents: List[PatientDocumentOut] = []
    conditions: List[PatientConditionOut] = []
    allergies: List[PatientAllergyOut] = []


class VerifiedDoctorResponse(BaseModel):
    """Row from doctors plus user/specialization names; extra doctor columns pass through."""
    model_config = ConfigDict(extra="allow")

    id: int
    doctor_name: Optional[str] = None
    email: Optional[str] = None
    specialization_name: Optional[str] = None
    is_verified: Optional[bool] = None
