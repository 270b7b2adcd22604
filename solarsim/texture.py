"""Images loaded from disk and bound as textures for drawing."""

from __future__ import annotations

from typing import Any, Protocol

from PIL import Image


def load_pixels(file_name: str) -> tuple[int, int, bytes]:
    """Load an image as RGBA bytes with its bottom row first.

    Returns ``(width, height, data)``. Raises :class:`OSError` when the file
    cannot be opened or is not an image.
    """
    with Image.open(file_name) as image:
        rgba = image.convert("RGBA").transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        return rgba.width, rgba.height, rgba.tobytes()


class TextureDevice(Protocol):
    """What a texture needs from the graphics device."""

    def create(self, width: int, height: int, data: bytes) -> Any: ...

    def bind(self, handle: Any) -> None: ...

    def release(self, handle: Any) -> None: ...


class _PygletTextureDevice:
    """Creates OpenGL textures through pyglet; needs a current OpenGL context."""

    def create(self, width: int, height: int, data: bytes) -> Any:
        import pyglet
        from pyglet import gl

        texture = pyglet.image.ImageData(width, height, "RGBA", data).get_texture()
        gl.glBindTexture(texture.target, texture.id)
        gl.glTexParameteri(texture.target, gl.GL_TEXTURE_MIN_FILTER, gl.GL_NEAREST)
        gl.glTexParameteri(texture.target, gl.GL_TEXTURE_MAG_FILTER, gl.GL_NEAREST)
        return texture

    def bind(self, handle: Any) -> None:
        from pyglet import gl

        gl.glActiveTexture(gl.GL_TEXTURE0)
        gl.glBindTexture(handle.target, handle.id)

    def release(self, handle: Any) -> None:
        handle.delete()


class Texture:
    """An image file that is sent to the graphics device the first time it is bound."""

    def __init__(self, file_name: str, device: TextureDevice | None = None) -> None:
        self.file_name = file_name
        self.width, self.height, self.pixels = load_pixels(file_name)
        self._device: TextureDevice = device if device is not None else _PygletTextureDevice()
        self._handle: Any = None

    @property
    def uploaded(self) -> bool:
        """Whether the image has been sent to the device."""
        return self._handle is not None

    def bind(self) -> None:
        """Make this texture the one used for drawing."""
        if self._handle is None:
            self._handle = self._device.create(self.width, self.height, self.pixels)
        self._device.bind(self._handle)

    def _release(self) -> None:
        if self._handle is not None:
            self._device.release(self._handle)
            self._handle = None

    def __enter__(self) -> "Texture":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._release()