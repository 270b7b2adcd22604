[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "solarsim"
version = "0.1.0"
description = "A small real-time 3D solar system scene with a component-based object model and an OBJ loader"
requires-python = ">=3.10"
keywords = ["3d", "opengl", "solar system", "obj", "wavefront", "rendering", "scene graph"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pyglet",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
solarsim = "solarsim.app:main"

[tool.hatch.build.targets.wheel]
packages = ["solarsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
