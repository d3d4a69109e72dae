"""Image-processing tools: synthetic images, image ids, gamma, histograms, contrast, ellipses and gradients."""

__version__ = "0.1.0"