"""palette_tool.core: foundation layer.

Contains the colour histogram, greedy grouping, palette formatting, image
decoding, configuration, type definitions and report builder.
This module has NO dependencies on palette_tool.techniques or palette_tool.registry.
Only stdlib, numpy, and PIL are allowed here.

Entry point: palette_tool.core.analyze.analyze_colours(pixels, width, height, threshold).
"""
