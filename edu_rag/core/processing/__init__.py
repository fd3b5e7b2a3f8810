"""Document processing state machine and transition publishing."""

from edu_rag.core.processing.progress import StageBands
from edu_rag.core.processing.state_machine import DocumentProcessingStateMachine
from edu_rag.core.processing.subject import TransitionSubject

__all__ = ["DocumentProcessingStateMachine", "StageBands", "TransitionSubject"]
