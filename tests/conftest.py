import typing

import numpy as np
import pytest

from pvtcurves import interpolants
from pvtcurves.curves import Curve
from pvtcurves.sources import ActiveCellGrid, InitData
from pvtcurves.types import RawCurve, UnitConvention


class FakeInterpolant:
    """
    Phase interpolant returning canned curves and simple analytic properties.

    FVF evaluates to `1 + region + 0.5 * mix_ratio + pressure * 1e-8`,
    viscosity to `(region + 1) * 1e-3 + mix_ratio * 1e-4`.
    """

    def __init__(
        self,
        curves: typing.Optional[typing.Dict[typing.Any, typing.Any]] = None,
    ) -> None:
        self.curves = curves or {}
        self.calls: typing.List[typing.Tuple[str, int, np.ndarray, np.ndarray]] = []
        self.curve_requests: typing.List[typing.Tuple[typing.Any, int]] = []

    def formation_volume_factor(self, region, mix_ratio, pressure):
        mix_ratio = np.asarray(mix_ratio, dtype=float)
        pressure = np.asarray(pressure, dtype=float)
        self.calls.append(("fvf", region, mix_ratio, pressure))
        return 1.0 + region + 0.5 * mix_ratio + pressure * 1e-8

    def viscosity(self, region, mix_ratio, pressure):
        mix_ratio = np.asarray(mix_ratio, dtype=float)
        pressure = np.asarray(pressure, dtype=float)
        self.calls.append(("viscosity", region, mix_ratio, pressure))
        return (region + 1) * 1e-3 + mix_ratio * 1e-4 + 0.0 * pressure

    def get_pvt_curve(self, curve, region):
        self.curve_requests.append((curve, region))
        return self.curves.get(curve, [((1.0e5, 2.0e5), (1.1, 1.2))])


def make_series(n: int = 3, offset: float = 0.0):
    x = np.linspace(1.0e5, 3.0e5, n) + offset
    y = np.linspace(1.0, 2.0, n) + offset
    return x, y


@pytest.fixture
def fake_oil() -> FakeInterpolant:
    return FakeInterpolant(
        curves={
            RawCurve.FVF: [make_series()],
            RawCurve.VISCOSITY: [make_series()],
            RawCurve.SATURATED_STATE: [make_series()],
        }
    )


@pytest.fixture
def fake_gas() -> FakeInterpolant:
    return FakeInterpolant(
        curves={
            RawCurve.FVF: [make_series(offset=i) for i in range(3)],
            RawCurve.VISCOSITY: Curve.immiscible(make_series()),
            RawCurve.SATURATED_STATE: [make_series()],
        }
    )


@pytest.fixture
def restore_interpolant_factories():
    saved = {
        phase: list(factories)
        for phase, factories in interpolants._INTERPOLANT_FACTORIES.items()
    }
    yield
    interpolants._INTERPOLANT_FACTORIES.clear()
    interpolants._INTERPOLANT_FACTORIES.update(saved)


@pytest.fixture
def fake_phases(restore_interpolant_factories, fake_oil, fake_gas):
    """Register factories that hand out `fake_oil` and `fake_gas` for 'FAKEO'/'FAKEG'."""
    from pvtcurves.types import PhaseIndex

    interpolants.register_interpolant_factory(
        PhaseIndex.LIQUID, "FAKEO", lambda data, init: fake_oil
    )
    interpolants.register_interpolant_factory(
        PhaseIndex.VAPOUR, "FAKEG", lambda data, init: fake_gas
    )
    return fake_oil, fake_gas


def make_init(
    pvtnum=None,
    oil: bool = True,
    gas: bool = True,
    unit_convention=UnitConvention.METRIC,
) -> InitData:
    keywords = {}
    if pvtnum is not None:
        keywords["PVTNUM"] = pvtnum
    if oil:
        keywords["FAKEO"] = True
    if gas:
        keywords["FAKEG"] = True
    return InitData(keywords=keywords, unit_convention=unit_convention)


@pytest.fixture
def grid() -> ActiveCellGrid:
    return ActiveCellGrid(num_cells=4)
