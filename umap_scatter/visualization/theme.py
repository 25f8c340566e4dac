"""Black-and-white theme constants for UMAP scatter plots."""

# ggplot2 sizes are in mm; matplotlib wants points
PT_PER_MM = 72.27 / 25.4
# one "line" of text at the default 11 pt base size
LINE_PT = 11 * 1.2

# theme_bw
PANEL_BG = "#FFFFFF"
GRID = "#EBEBEB"    # major grid lines
BORDER = "#333333"  # panel frame
TEXT = "#000000"
NA_FILL = "#7F7F7F"  # grey50, missing fill values

# Diverging gradient for numeric fill, centred on zero
GRADIENT_LOW = "blue"
GRADIENT_MID = "white"
GRADIENT_HIGH = "red"

# Background ellipses: orange, thistle4, yellow
ELLIPSE_PALETTE = ("#FFA500", "#8B7B8B", "#FFFF00")
ELLIPSE_ALPHA = 0.2
ELLIPSE_LEVEL = 0.95

POINT_SHAPE = "o"       # fixed marker for single-variable plots
POINT_EDGE = "black"
POINT_EDGE_WIDTH = 0.5
LEGEND_KEY_SIZE = 7     # legend marker size override, mm
LEGEND_KEY_HEIGHT = 1.7
TITLE_SIZE = 18
