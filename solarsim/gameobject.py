"""Scene objects carrying a transform and a list of components."""

from __future__ import annotations

from typing import Any, TypeVar

import numpy as np

from solarsim import transform
from solarsim.components import Component, DrawComponent

C = TypeVar("C", bound=Component)


class GameObject:
    """An object in the scene with position, rotation, scale and components."""

    def __init__(self, position=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0), scale=(1.0, 1.0, 1.0)) -> None:
        self.position = np.array(position, dtype=float)
        self.rotation = np.array(rotation, dtype=float)
        self.scale = np.array(scale, dtype=float)
        self._components: list[Component] = []
        self._draw_component: DrawComponent | None = None

    @property
    def components(self) -> tuple[Component, ...]:
        """The attached components in the order they were added."""
        return tuple(self._components)

    @property
    def draw_component(self) -> DrawComponent | None:
        """The component used for drawing, the first drawable one added."""
        return self._draw_component

    def add_component(self, component: Component) -> None:
        """Attach ``component`` to this object."""
        component.game_object = self
        self._components.append(component)
        if self._draw_component is None and isinstance(component, DrawComponent):
            self._draw_component = component

    def get_component(self, kind: type[C]) -> C | None:
        """Return the first component that is an instance of ``kind``."""
        return next((c for c in self._components if isinstance(c, kind)), None)

    def remove_component(self, kind: type[Component]) -> None:
        """Remove every component that is an instance of ``kind``."""
        self._components = [c for c in self._components if not isinstance(c, kind)]
        if self._draw_component is not None and isinstance(self._draw_component, kind):
            self._draw_component = next(
                (c for c in self._components if isinstance(c, DrawComponent)), None
            )

    def model_matrix(self, parent_matrix=None) -> np.ndarray:
        """Return the object's model matrix relative to ``parent_matrix``."""
        matrix = transform.identity() if parent_matrix is None else np.asarray(parent_matrix, dtype=float)
        matrix = transform.translate(matrix, self.position)
        matrix = transform.rotate(matrix, self.rotation[0], (1, 0, 0))
        matrix = transform.rotate(matrix, self.rotation[1], (0, 1, 0))
        matrix = transform.rotate(matrix, self.rotation[2], (0, 0, 1))
        return transform.scale(matrix, self.scale)

    def update(self, delta_time: float) -> None:
        """Update every component in order."""
        for component in self._components:
            component.update(delta_time)

    def draw(self, renderer: Any, parent_matrix=None) -> None:
        """Set the model matrix on the renderer's shader and draw, if drawable."""
        if self._draw_component is None:
            return
        renderer.shader.set_model_matrix(self.model_matrix(parent_matrix))
        self._draw_component.draw(renderer)