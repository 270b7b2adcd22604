"""A component-based 3D solar system scene with an OBJ model loader and viewer."""

__version__ = "0.1.0"