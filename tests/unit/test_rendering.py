"""Unit tests for answer rendering."""

from medexplain.db import Citation, Guideline, Interaction, Phenotype, ViewMode
from medexplain.services.query import (
    NO_INFORMATION,
    format_citation,
    render_answer,
    render_clinician_answer,
    render_patient_answer,
)


def make_interaction(**fields) -> Interaction:
    phenotype = fields.pop("phenotype", None)
    interaction = Interaction(**fields)
    if phenotype is not None:
        interaction.phenotype = Phenotype(phenotype=phenotype)
    return interaction


class TestPatientAnswer:
    def test_prefers_guideline_patient_summary(self) -> None:
        interaction = make_interaction(summary="Interaction summary")
        guideline = Guideline(patient_summary="Reduce dose")
        assert render_patient_answer(interaction, guideline) == "Reduce dose"

    def test_falls_back_to_interaction_summary(self) -> None:
        interaction = make_interaction(summary="Interaction summary")
        assert render_patient_answer(interaction, Guideline()) == "Interaction summary"
        assert render_patient_answer(interaction, None) == "Interaction summary"

    def test_no_information(self) -> None:
        assert render_patient_answer(make_interaction(), None) == NO_INFORMATION


class TestClinicianAnswer:
    def test_sections_in_fixed_order(self) -> None:
        interaction = make_interaction(
            action="Reduce dose",
            evidence="Dosing studies",
            summary="Interaction summary",
            phenotype="Poor Metabolizer",
        )
        guideline = Guideline(clinician_summary="Clinical summary", evidence_level="High")

        answer = render_clinician_answer(interaction, guideline)

        assert answer == (
            "Clinical summary\n\n"
            "Action: Reduce dose\n\n"
            "Evidence: Dosing studies\n\n"
            "Phenotype: Poor Metabolizer\n\n"
            "Evidence Level: High"
        )

    def test_each_section_falls_back_independently(self) -> None:
        interaction = make_interaction(action="Avoid")
        answer = render_clinician_answer(interaction, None)

        assert answer.split("\n\n") == [
            "N/A",
            "Action: Avoid",
            "Evidence: N/A",
            "Phenotype: N/A",
            "Evidence Level: N/A",
        ]

    def test_summary_falls_back_to_interaction(self) -> None:
        interaction = make_interaction(summary="Interaction summary")
        answer = render_clinician_answer(interaction, Guideline(evidence_level="Low"))

        sections = answer.split("\n\n")
        assert sections[0] == "Interaction summary"
        assert sections[-1] == "Evidence Level: Low"


class TestRenderAnswer:
    def test_dispatches_on_view_mode(self) -> None:
        interaction = make_interaction(summary="S", action="A")
        guideline = Guideline(patient_summary="P", clinician_summary="C")

        assert render_answer(ViewMode.PATIENT, interaction, guideline) == "P"
        assert render_answer(ViewMode.CLINICIAN, interaction, guideline).startswith("C\n\nAction: A")


def test_format_citation() -> None:
    citation = Citation(
        title="CPIC Guideline for Warfarin Dosing",
        authors="Johnson JA",
        journal="Clin Pharmacol Ther",
        year=2017,
    )
    assert format_citation(citation) == (
        "CPIC Guideline for Warfarin Dosing - Johnson JA (Clin Pharmacol Ther, 2017)"
    )


def test_view_mode_from_string() -> None:
    assert ViewMode.from_string("clinician") is ViewMode.CLINICIAN
    assert ViewMode.from_string(" PATIENT ") is ViewMode.PATIENT
    assert ViewMode.from_string("nurse") is None
