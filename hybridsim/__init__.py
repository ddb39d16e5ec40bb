from .motor import MotorConfig, MotorSimulation, Status, TimeSeries
from .saturation import SaturationTable
from .equilibrium import EquilibriumTable
from .tank import Tank, TwoPhase, VaporOnly
from .chamber import CombustionChamber
from .errors import HybridSimError, ConfigurationError, OutOfRangeError, PressureInversionError, ConvergenceWarning
from . import nitrous
