from quotewatch.services.polling.loop import LoopState, PollingLoop

__all__ = ["LoopState", "PollingLoop"]
