"""FourSG: compile a folder of markdown notes into a static website."""

__version__ = "0.3.0"
