from .sink import ERROR_TAG, INFO_TAG, OutputSink

__all__ = ["ERROR_TAG", "INFO_TAG", "OutputSink"]
