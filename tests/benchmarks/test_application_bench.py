"""Performance benchmarks for the application workflow."""

from pytest_codspeed import BenchmarkFixture

from app.models.application import Application
from app.models.enums import ApplicationStatus
from app.services.application import to_application_public
from app.services.application_state import ApplicationStateMachine, can_transition
from tests.fakes import NOW


def test_transition_table_lookup_performance(benchmark: BenchmarkFixture):
    """Benchmark checking every status pair against the table."""
    pairs = [(a, b) for a in ApplicationStatus for b in ApplicationStatus]

    @benchmark
    def check_all():
        return sum(can_transition(a, b) for a, b in pairs)

    assert check_all == 5


def test_apply_transition_performance(benchmark: BenchmarkFixture):
    """Benchmark computing an accepted application from a pending one."""
    machine = ApplicationStateMachine(clock=lambda: NOW)
    application = Application(
        id_application=1, id_volunteer=1, id_project=1, applied_at=NOW
    )

    @benchmark
    def accept():
        return machine.apply_transition(application, ApplicationStatus.ACCEPTED, "ok")

    assert accept.status == ApplicationStatus.ACCEPTED


def test_public_projection_performance(benchmark: BenchmarkFixture):
    application = Application(
        id_application=1, id_volunteer=1, id_project=1, applied_at=NOW
    )

    @benchmark
    def project():
        return to_application_public(application)

    assert project.allowed_transitions
