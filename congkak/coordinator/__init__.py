from .computer import ComputerOpponent, play_out
from .coordinator import QUICK, TRADITIONAL, Coordinator, CoordinatorConfig
from .phase import ExternalTrigger, GamePhase, PhaseMachine, Rendezvous, SowCompleted, SowStarted
from .store import BoardStore, GameSnapshot, snapshot_from_dict, snapshot_to_dict

__all__ = [
    "ComputerOpponent",
    "play_out",
    "QUICK",
    "TRADITIONAL",
    "Coordinator",
    "CoordinatorConfig",
    "ExternalTrigger",
    "GamePhase",
    "PhaseMachine",
    "Rendezvous",
    "SowCompleted",
    "SowStarted",
    "BoardStore",
    "GameSnapshot",
    "snapshot_from_dict",
    "snapshot_to_dict",
]
