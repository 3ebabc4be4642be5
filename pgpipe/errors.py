""" errors.py
"""

__all__ = ('PipelineError',
           'NoSuitableEncryptionKey',
           'SinkCreationFailed',
           'SourceOpenFailed',
           'LayerBuildFailed',
           'WriteFailed',
           'FinalizeFailed',)


class PipelineError(Exception):
    """Raised as a general error in pgpipe"""
    pass


class NoSuitableEncryptionKey(PipelineError):
    """Raised when a certificate has no key that can be encrypted to"""
    def __init__(self, identity):
        super(NoSuitableEncryptionKey, self).__init__("No suitable encryption subkey for {}".format(identity))
        self.identity = identity


class SinkCreationFailed(PipelineError):
    """Raised when the output of a pipeline cannot be created"""
    pass


class SourceOpenFailed(PipelineError):
    """Raised when the input of a pipeline cannot be opened"""
    pass


class LayerBuildFailed(PipelineError):
    """Raised when a layer of a writer chain could not be constructed"""
    def __init__(self, layer, cause):
        super(LayerBuildFailed, self).__init__("Failed to create {}: {}".format(layer, cause))
        self.layer = layer
        self.cause = cause


class WriteFailed(PipelineError):
    """Raised when writing into a writer chain fails"""
    def __init__(self, cause):
        super(WriteFailed, self).__init__("Write failed: {}".format(cause))
        self.cause = cause


class FinalizeFailed(PipelineError):
    """Raised when a layer of a writer chain fails to finalize"""
    def __init__(self, layer, cause):
        super(FinalizeFailed, self).__init__("Failed to finalize {}: {}".format(layer, cause))
        self.layer = layer
        self.cause = cause
