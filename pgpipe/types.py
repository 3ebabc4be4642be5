""" types.py
"""
import abc

from pgpy.types import Armorable

from .constants import ArmorKind
from .decorators import LayerAction
from .errors import PipelineError

__all__ = ['ArmoredBlock',
           'Layer']


class ArmoredBlock(Armorable):
    """
    Already-serialized packet data, exported as an ASCII-armored block of a fixed kind.

    PGPy picks the armor header of an object from its type; an :py:obj:`ArmoredBlock` lets a writer chain frame the
    bytes produced by the layers it wraps under the header it was configured with.
    """
    def __init__(self, kind=ArmorKind.Message):
        super(ArmoredBlock, self).__init__()
        self.kind = ArmorKind(kind)
        self._bytes = b''

    @property
    def magic(self):
        return str(self.kind)

    def parse(self, packet):
        self._bytes = bytes(packet)

    def __bytes__(self):
        return self._bytes

    @classmethod
    def frame(cls, kind, data):
        obj = cls(kind)
        obj.parse(data)
        return obj


class Layer(metaclass=abc.ABCMeta):
    """
    One transform of a writer chain.

    A layer hands its output to ``target``, the next layer towards the sink (``None`` only for the layer that owns the
    sink). It receives data through :py:meth:`accept` (the final product of the layer wrapping it, or plaintext for the
    innermost layer), and hands its own product to ``target`` exactly once, when it is finalized.
    """
    #: short name used in errors and log records
    name = 'layer'
    #: ``True`` if plaintext may be written into this layer directly
    writable = False

    def __init__(self, target):
        super(Layer, self).__init__()
        self._target = target
        self._finalized = False

    @property
    def target(self):
        return self._target

    @property
    def is_finalized(self):
        return self._finalized

    def __repr__(self):
        return "<{cls:s} [{name:s}]>".format(cls=self.__class__.__name__, name=self.name)

    @LayerAction(is_finalized=False)
    def write(self, data):
        if not self.writable:
            raise PipelineError("{:s} layer is not the innermost layer of its chain".format(self.name))

        self.accept(data)

    @abc.abstractmethod
    def accept(self, payload):
        """Take ``payload`` from the layer wrapping this one."""

    @abc.abstractmethod
    def _finalize(self):
        """Compute the final product of this layer, or ``None`` if there is nothing to pass on."""

    @LayerAction(is_finalized=False)
    def finalize(self):
        try:
            product = self._finalize()

        finally:
            self._finalized = True

        if product is not None and self._target is not None:
            self._target.accept(product)
