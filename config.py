"""
Configuration file for the bubble chart label placer.
Modify this file to customize placement, sizing and output behavior.
"""

import math

# Placement configuration
PLACEMENT_CONFIG = {
    "margin": 5.0,  # Clearance kept between independent rectangles
    "rotation_increment": math.pi / 8,  # Angular sweep step (16 steps per turn)
    "radial_increment": 5.0,  # Offset added each time the sweep is exhausted
    "max_radial_steps": 400,  # Hard ceiling on radial escalations
    "attachment_search_steps": 40,  # Radial bound for the "persistent" policy
    "attachment_policy": "eager",  # "eager", "persistent" or "disabled"
    "walk_step": 1.0,  # Sample spacing of the attachment walk
    "marker_radius": 2.0,  # Disc registered at each leader line terminus
}

# Bubble size configuration
BUBBLE_SIZE_CONFIG = {
    "mapping": "step",  # "step" or "linear"
    # Step mapping: magnitude <= threshold[i] gives sizes[i], otherwise sizes[-1]
    "step_thresholds": [200, 400, 600, 800],
    "step_sizes": [20, 50, 70, 80, 90],
    # Linear mapping: clamped between the smallest and largest magnitude
    "linear_range": {"min_radius": 20, "max_radius": 90},
    # Bubble sizes above are expressed for this canvas
    "reference_canvas": (1200, 700),
}

# Category configuration
CATEGORY_CONFIG = {
    "names": {
        "A": "Solution/project",
        "B": "Consulting service",
        "C": "Indirect",
    },
    # Any matplotlib color name or hex code
    "colors": {
        "A": "tan",
        "B": "limegreen",
        "C": "red",
    },
}

# Chart configuration
CHART_CONFIG = {
    "width": 1200,
    "height": 700,
    "padding": 60,  # Space between canvas edge and plot area
    "axis_band_height": 30,  # Reserved band under the plot for the category axis
    "y_range_padding": 0.1,  # Fraction of the y range added above and below
    "font_size": 14,
    "label_padding": 4,  # Pixels added around measured label text
    "gridlines": 5,
}

# Output configuration
OUTPUT_CONFIG = {
    "verbose": True,  # Show progress information
    "debug": False,  # Trace every candidate tried during placement
}
