"""
Tests for the admission lifecycle and the patient/hospital value objects.
"""

import pytest

from admissions.core.exceptions import DisallowedHospitalError
from admissions.domain import AdmissionStatus, Hospital, IllegalTransitionError, Patient, StatusKind


def test_new_patient_has_no_id_and_new_status():
    patient = Patient.new("Ada", ["Napa"])
    assert patient.id is None
    assert patient.status.is_new
    assert patient.disallowed_hospitals == frozenset({"Napa"})
    assert patient.admitted_to is None


def test_lifecycle_new_to_waitlist_to_admitted():
    patient = Patient.new("Ada").with_random_id().waitlisted()
    assert patient.is_waitlisted

    admitted = patient.admit_to("Coalinga")
    assert admitted.is_admitted
    assert admitted.admitted_to == "Coalinga"
    assert admitted.id == patient.id
    # The original value is untouched
    assert patient.is_waitlisted


def test_admitted_patient_returns_to_waitlist():
    status = AdmissionStatus.admitted_to("Napa").to_waitlist()
    assert status.kind is StatusKind.ON_WAITLIST
    assert status.hospital is None


def test_cannot_admit_new_patient():
    with pytest.raises(IllegalTransitionError):
        Patient.new("Ada").admit_to("Napa")


def test_cannot_admit_twice():
    patient = Patient.new("Ada").waitlisted().admit_to("Napa")
    with pytest.raises(IllegalTransitionError):
        patient.admit_to("Patton")


def test_cannot_waitlist_twice():
    with pytest.raises(IllegalTransitionError):
        Patient.new("Ada").waitlisted().waitlisted()


def test_admission_to_excluded_hospital_is_rejected():
    patient = Patient.new("Ada", ["Napa", "Patton"]).waitlisted()
    with pytest.raises(DisallowedHospitalError):
        patient.admit_to("Napa")


def test_admitted_status_requires_hospital():
    with pytest.raises(ValueError):
        AdmissionStatus(StatusKind.ADMITTED)
    with pytest.raises(ValueError):
        AdmissionStatus(StatusKind.ON_WAITLIST, "Napa")


def test_status_str():
    assert str(AdmissionStatus.new()) == "new patient"
    assert str(AdmissionStatus.on_waitlist()) == "on waitlist"
    assert str(AdmissionStatus.admitted_to("Napa")) == "admitted to Napa"


def test_patient_is_immutable():
    patient = Patient.new("Ada")
    with pytest.raises(AttributeError):
        patient.name = "Grace"


def test_hospital_is_immutable_with_empty_roster():
    hospital = Hospital(id=1, name="Napa")
    assert hospital.patient_ids == ()
    with pytest.raises(AttributeError):
        hospital.name = "Patton"
