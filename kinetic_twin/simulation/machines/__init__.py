from .base_machine import ProcessInstance, ProcessState, scaled_ticks
from .processor import ProcessScheduler

__all__ = ['ProcessInstance', 'ProcessState', 'ProcessScheduler', 'scaled_ticks']
