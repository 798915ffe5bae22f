import pytest

from core.types import PatientRecord


class FixedRng:
    """Returns queued values from random(), repeating the last one."""

    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


SCENARIO = dict(
    age=65,
    anaemia=False,
    creatinine_phosphokinase=582,
    diabetes=False,
    ejection_fraction=38,
    high_blood_pressure=False,
    platelets=265000,
    serum_creatinine=1.9,
    serum_sodium=136,
    sex=True,
    smoking=False,
    time=4,
    death_event=False,
)

MINIMAL = dict(
    age=40,
    anaemia=False,
    creatinine_phosphokinase=100,
    diabetes=False,
    ejection_fraction=60,
    high_blood_pressure=False,
    platelets=300000,
    serum_creatinine=1.0,
    serum_sodium=140,
    sex=False,
    smoking=False,
    time=200,
    death_event=False,
)

WORST = dict(
    age=90,
    anaemia=True,
    creatinine_phosphokinase=5000,
    diabetes=True,
    ejection_fraction=15,
    high_blood_pressure=True,
    platelets=50000,
    serum_creatinine=5.0,
    serum_sodium=125,
    sex=True,
    smoking=True,
    time=2,
    death_event=True,
)


@pytest.fixture
def scenario_record():
    return PatientRecord(**SCENARIO)


@pytest.fixture
def minimal_record():
    return PatientRecord(**MINIMAL)


@pytest.fixture
def worst_record():
    return PatientRecord(**WORST)


@pytest.fixture
def make_record():
    def _make(**overrides):
        return PatientRecord(**{**MINIMAL, **overrides})
    return _make


@pytest.fixture
def fixed_rng():
    return FixedRng
