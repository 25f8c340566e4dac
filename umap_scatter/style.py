"""Final styling step: theme, title and legend placement."""

from __future__ import annotations

from dataclasses import dataclass

from matplotlib.cm import ScalarMappable
from matplotlib.legend import Legend

from .visualization import theme
from .visualization.scatter import Scale, UMAPPlot

_GUIDE_GAP = 0.03        # axes fraction between stacked guides
_OUTSIDE_X = 1.02
_COLORBAR_HEIGHT = 0.3
_COLORBAR_WIDTH = 0.04


@dataclass
class PlotStyle:
    """Theme and legend settings applied after the layers are drawn.

    ``legend_position`` is an ``(x, y)`` axes fraction; when set, the legends
    are centred on it inside the panel with a black border.  Otherwise they
    are stacked to the right of the panel.
    """

    legend_title_size: float = 16
    legend_text_size: float = 14
    legend_position: tuple[float, float] | None = None
    title: str | None = None
    title_size: float = theme.TITLE_SIZE
    figsize: tuple[float, float] = (8.0, 6.0)

    @property
    def legend_inside(self) -> bool:
        return self.legend_position is not None

    def apply(self, plot: UMAPPlot) -> UMAPPlot:
        """Style *plot* in place and return it."""
        ax = plot.ax
        ax.set_aspect("equal", adjustable="datalim")

        ax.set_facecolor(theme.PANEL_BG)
        ax.grid(True, color=theme.GRID, linewidth=0.5)
        ax.set_axisbelow(True)
        for spine in ax.spines.values():
            spine.set_color(theme.BORDER)

        # UMAP coordinates carry no meaning of their own
        ax.tick_params(bottom=False, left=False, labelbottom=False, labelleft=False)
        ax.set_xlabel("")
        ax.set_ylabel("")

        if self.title is not None:
            ax.set_title(self.title, fontsize=self.title_size, loc="center")

        plot.guides = self._place_guides(plot)
        return plot

    def _make_legend(self, plot: UMAPPlot, scale: Scale) -> Legend:
        handles = scale.legend_handles()
        legend = Legend(
            plot.ax,
            handles,
            [h.get_label() for h in handles],
            title=scale.name,
            loc="upper center" if self.legend_inside else "upper left",
            bbox_to_anchor=(_OUTSIDE_X, 1.0),
            bbox_transform=plot.ax.transAxes,
            frameon=self.legend_inside,
            fancybox=False,
            framealpha=1.0,
            edgecolor="black",
            fontsize=self.legend_text_size,
            title_fontsize=self.legend_title_size,
            handleheight=theme.LEGEND_KEY_HEIGHT,
            alignment="left",
        )
        plot.ax.add_artist(legend)
        return legend

    def _make_colorbar(self, plot: UMAPPlot, scale: Scale, x: float, bottom: float):
        left = x - _COLORBAR_WIDTH / 2 if self.legend_inside else x
        cax = plot.ax.inset_axes([left, bottom, _COLORBAR_WIDTH, _COLORBAR_HEIGHT])
        colorbar = plot.figure.colorbar(ScalarMappable(norm=scale.norm, cmap=scale.cmap), cax=cax)
        cax.set_title(scale.name, fontsize=self.legend_title_size, loc="left")
        cax.tick_params(labelsize=self.legend_text_size)
        return colorbar

    def _place_guides(self, plot: UMAPPlot) -> list:
        """Create one guide per scale and stack them vertically."""
        ax = plot.ax
        to_axes = ax.transAxes.inverted()
        ax_height_pt = ax.get_window_extent().height * 72 / plot.figure.dpi

        blocks = []
        for scale in plot.scales.values():
            if scale.is_continuous:
                title_frac = self.legend_title_size * 1.6 / ax_height_pt
                blocks.append((scale, None, _COLORBAR_HEIGHT + title_frac))
            else:
                legend = self._make_legend(plot, scale)
                height = legend.get_window_extent().transformed(to_axes).height
                blocks.append((scale, legend, height))

        if not blocks:
            return []

        total = sum(h for _, _, h in blocks) + _GUIDE_GAP * (len(blocks) - 1)
        if self.legend_inside:
            x, y = self.legend_position
            top = y + total / 2
        else:
            x, top = _OUTSIDE_X, 1.0

        guides = []
        for scale, legend, height in blocks:
            if legend is None:
                guides.append(self._make_colorbar(plot, scale, x, top - height))
            else:
                legend.set_bbox_to_anchor((x, top), transform=ax.transAxes)
                guides.append(legend)
            top -= height + _GUIDE_GAP
        return guides
