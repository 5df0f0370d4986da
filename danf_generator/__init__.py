"""danf-generator -- scaffolds new Danf applications and modules."""

__version__ = "0.1.0"
