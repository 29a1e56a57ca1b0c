from dataclasses import dataclass, field, fields, replace
import numpy as np

from .errors import ConfigurationError


@dataclass(frozen=True)
class Constants:
    F: float = 96487.0      # Faraday constant [C/mol]
    R: float = 8.314        # gas constant [J/(mol K)]


@dataclass(frozen=True)
class ElectrodeParams:
    # geometry
    R_s: float = 2.0e-6         # particle radius [m]
    L: float = 100.0e-6         # electrode thickness [m]
    eps_s: float = 0.58         # active material volume fraction [-]
    # solid diffusion, Arrhenius in temperature
    D_s_ref: float = 3.9e-14    # [m^2/s]
    E_D: float = 4.0e3          # [J/mol]
    # kinetics, Arrhenius in temperature
    k_ref: float = 5.031e-11    # [m^2.5 / (mol^0.5 s)]
    E_k: float = 3.0e4          # [J/mol]
    # capacity
    c_s_max: float = 30555.0    # [mol/m^3]
    stoich_soc0: float = 0.27   # stoichiometry at 0 % SOC [-]
    stoich_soc100: float = 0.80 # stoichiometry at 100 % SOC [-]

    @property
    def a_s(self):
        """Specific interfacial area [1/m]."""
        return 3 * self.eps_s / self.R_s


def _default_anode():
    return ElectrodeParams()


def _default_cathode():
    return ElectrodeParams(
        R_s=2.0e-6,
        L=80.0e-6,
        eps_s=0.50,
        D_s_ref=1.0e-14,
        E_D=2.0e4,
        k_ref=2.334e-11,
        E_k=3.0e4,
        c_s_max=51555.0,
        stoich_soc0=0.955,
        stoich_soc100=0.50,
    )


@dataclass(frozen=True)
class CellParams:
    A: float = 0.0596       # electrode plate area [m^2]
    L_sep: float = 25.0e-6  # separator thickness [m]
    c_e: float = 1000.0     # average electrolyte concentration [mol/m^3]
    R_c: float = 2.0e-3     # contact resistance [Ohm m^2]
    C_nom: float = 1.5      # nominal capacity [Ah]
    V_min: float = 3.0      # lower cut-off voltage [V]
    V_max: float = 4.2      # upper cut-off voltage [V]


@dataclass(frozen=True)
class ThermalParams:
    rho: float = 2500.0     # bulk density [kg/m^3]
    c_p: float = 1000.0     # lumped specific heat [J/(kg K)]
    h: float = 10.0         # convective heat transfer coefficient [W/(m^2 K)]
    A_cool: float = 4.2e-3  # cooled cell surface [m^2]
    T_amb: float = 298.15   # ambient temperature [K]
    T_ref: float = 298.15   # reference temperature of the fitted data [K]


@dataclass(frozen=True)
class SPMParams:
    """
    Full parameter set of the thermal single particle model.

    The defaults describe an LCO / graphite cell. Every group is frozen, so a
    parameter set can be shared between the model, the event functions and the
    post-processing without being modified along the way. Use
    ``dataclasses.replace`` (or ``apply_overrides``) to derive variants.
    """
    const: Constants = field(default_factory=Constants)
    neg: ElectrodeParams = field(default_factory=_default_anode)
    pos: ElectrodeParams = field(default_factory=_default_cathode)
    cell: CellParams = field(default_factory=CellParams)
    thermal: ThermalParams = field(default_factory=ThermalParams)
    temperature_dependent: bool = True

    @property
    def L_cell(self):
        """Thickness of the anode / separator / cathode sandwich [m]."""
        return self.neg.L + self.cell.L_sep + self.pos.L

    @property
    def V_cell(self):
        """Volume of the sandwich used by the lumped thermal balance [m^3]."""
        return self.cell.A * self.L_cell

    def capacity(self, name):
        """Charge [Ah] stored in electrode ``name`` between 0 % and 100 % SOC."""
        e = getattr(self, name)
        swing = abs(e.stoich_soc100 - e.stoich_soc0)
        return self.const.F * self.cell.A * e.L * e.eps_s * e.c_s_max * swing / 3600.0

    def arrhenius(self, value_ref, activation_energy, T):
        """Scale a reference value to temperature ``T`` with an Arrhenius law."""
        if not self.temperature_dependent:
            return value_ref
        th = self.thermal
        return value_ref * np.exp(activation_energy / self.const.R * (1.0 / th.T_ref - 1.0 / T))

    def validate(self):
        """
        Check every numeric field before the model is built.

        Raises:
        ConfigurationError: if a field is missing, non-finite or out of range.
        """
        strictly_positive = {
            'const': ('F', 'R'),
            'neg': ('R_s', 'L', 'D_s_ref', 'k_ref', 'c_s_max'),
            'pos': ('R_s', 'L', 'D_s_ref', 'k_ref', 'c_s_max'),
            'cell': ('A', 'c_e', 'C_nom'),
            'thermal': ('rho', 'c_p', 'A_cool', 'T_amb', 'T_ref'),
        }
        non_negative = {
            'neg': ('E_D', 'E_k'),
            'pos': ('E_D', 'E_k'),
            'cell': ('L_sep', 'R_c'),
            'thermal': ('h',),
        }
        for group_name in strictly_positive:
            group = getattr(self, group_name)
            for f in fields(group):
                value = getattr(group, f.name)
                if value is None or not np.isfinite(value):
                    raise ConfigurationError(f"{group_name}.{f.name} must be a finite number, got {value!r}")
        for group_name, names in strictly_positive.items():
            group = getattr(self, group_name)
            for name in names:
                if getattr(group, name) <= 0:
                    raise ConfigurationError(f"{group_name}.{name} must be positive, got {getattr(group, name)!r}")
        for group_name, names in non_negative.items():
            group = getattr(self, group_name)
            for name in names:
                if getattr(group, name) < 0:
                    raise ConfigurationError(f"{group_name}.{name} must be non-negative, got {getattr(group, name)!r}")
        for name in ('neg', 'pos'):
            electrode = getattr(self, name)
            if not 0 < electrode.eps_s <= 1:
                raise ConfigurationError(f"{name}.eps_s must lie in (0, 1], got {electrode.eps_s!r}")
            for stoich in ('stoich_soc0', 'stoich_soc100'):
                value = getattr(electrode, stoich)
                if not 0 < value < 1:
                    raise ConfigurationError(f"{name}.{stoich} must lie in (0, 1), got {value!r}")
            if electrode.stoich_soc0 == electrode.stoich_soc100:
                raise ConfigurationError(f"{name}: stoichiometry at 0 % and 100 % SOC must differ")
        if self.cell.V_min >= self.cell.V_max:
            raise ConfigurationError(
                f"cell.V_min ({self.cell.V_min}) must be lower than cell.V_max ({self.cell.V_max})")
        return self


def apply_overrides(params, overrides):
    """
    Return a copy of ``params`` with selected fields replaced.

    Parameters:
    params (SPMParams): Base parameter set.
    overrides (dict): Mapping ``{group: {name: value}}``, e.g.
        ``{'cell': {'C_nom': 2.0}}``. The group ``'model'`` addresses the
        top-level flags such as ``temperature_dependent``.

    Returns:
    SPMParams: The updated (and validated) parameter set.
    """
    top_level = {}
    for group_name, values in overrides.items():
        if group_name == 'model':
            for name, value in values.items():
                if name != 'temperature_dependent':
                    raise ConfigurationError(f"Unknown model option {name!r}")
                top_level[name] = bool(value)
            continue
        if group_name not in ('const', 'neg', 'pos', 'cell', 'thermal'):
            raise ConfigurationError(f"Unknown parameter group {group_name!r}")
        group = getattr(params, group_name)
        known = {f.name for f in fields(group)}
        unknown = set(values) - known
        if unknown:
            raise ConfigurationError(f"Unknown parameter(s) in {group_name!r}: {sorted(unknown)}")
        top_level[group_name] = replace(group, **{k: float(v) for k, v in values.items()})
    return replace(params, **top_level).validate()
