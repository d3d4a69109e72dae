[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "improclab"
version = "0.1.0"
description = "Small image-processing tools: test images, image ids, gamma strips, histograms, autocontrast, ellipse detection and gradient views."
requires-python = ">=3.10"
keywords = [
    "image processing",
    "autocontrast",
    "histogram",
    "gamma correction",
    "ellipse detection",
    "gradients",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy",
    "pillow",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
improclab-check-ids = "improclab.checkids:main"
improclab-gamma = "improclab.gamma:main"
improclab-histograms = "improclab.histograms:main"
improclab-autocontrast = "improclab.autocontrast_cli:main"
improclab-ellipses = "improclab.ellipses:main"
improclab-gradients = "improclab.gradients:main"

[tool.hatch.build.targets.wheel]
packages = ["improclab"]

[tool.pytest.ini_options]
addopts = "-ra"
