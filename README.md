# solarsim

A small real-time 3D scene of a solar system: a sun and eight planets orbit
the origin, a spinning cube circles among them, and a spaceship follows a
first-person camera around.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running

```
solarsim
```

This opens a 1200×800 window and loads the sun, planet and ship models from
`models/`, relative to the working directory (for example
`models/earth/earth.obj`, `models/ship/shipA_OBJ.obj`). Every OBJ file must
be present: a missing model file stops start-up with an error. A material
(`.mtl`) file named by a model that cannot be opened is logged and skipped.

Controls:

- move the mouse to look around
- `W`, `A`, `S` and `D` to fly around
- `Escape` to quit

## Using the pieces

The scene is built from `GameObject`s that carry components:

- `solarsim.gameobject.GameObject` holds `position`, `rotation` and `scale`,
  its components (`add_component`, `get_component`, `remove_component`), and
  the first drawable component it was given. `model_matrix()` gives its
  transform; `update()` and `draw()` pass on to the components.
- `solarsim.components` has the `Component` and `DrawComponent` base classes,
  `DistanceRotateComponent` (orbit around the origin in the XZ plane),
  `LocalRotateComponent` (spin in place) and `RelativeLock` (stay in front of
  a camera).
- `solarsim.camera.FpsCam` is the first-person camera; `update()` takes the
  cursor position and the pressed keys, `matrix()` gives the view matrix.
- `solarsim.cube.Cube` and `solarsim.objmodel.GraphicModel` are drawable
  components; the latter reads Wavefront OBJ files with their MTL materials
  and diffuse texture maps (`solarsim.texture.Texture`).
- `solarsim.tigl` has `Vertex`, the `Shader` state (matrices, lighting, fog,
  color options) and the `Renderer` that collects vertices between `begin()`
  and `end()`; `tigl.init()` compiles the shader in the current OpenGL
  context.
- `solarsim.transform` has the 4×4 matrix helpers (`identity`, `translate`,
  `rotate`, `scale`, `perspective`, `normal_matrix`).
- `solarsim.galaxy.generate` adds the solar system objects to a list, and
  `solarsim.app.build_scene` puts the whole scene together; the model loader
  can be replaced through their `model_factory` argument.

```python
from solarsim.gameobject import GameObject
from solarsim.components import DistanceRotateComponent

planet = GameObject()
planet.add_component(DistanceRotateComponent(750.0, 0.75))
planet.update(1.0)
print(planet.position)
```

## What it does not do

- No model or texture files come with the package; the viewer needs them
  under `models/` in the working directory.
- Models are drawn with their positions and diffuse textures only: normals
  are read but not used for drawing, and material colors (`Kd`, `Ka`, `Ks`)
  and the other material settings are ignored.