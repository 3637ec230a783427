from .criticality import Criticality
from .outcome_status import OutcomeStatus
from .run_status import RunStatus
from .step_state import StepState

__all__ = ["Criticality", "OutcomeStatus", "RunStatus", "StepState"]
