"""Core modules for the transaction calendar heatmap."""

from . import aggregate, config, currency, domain, export, grid, insights, interaction, pipeline, scale, summarize, synth, utils, viz
from .domain import Domain
from .pipeline import CalendarView, build_calendar

__all__ = [
	"aggregate",
	"config",
	"currency",
	"domain",
	"export",
	"grid",
	"insights",
	"interaction",
	"pipeline",
	"scale",
	"summarize",
	"synth",
	"utils",
	"viz",
	"Domain",
	"CalendarView",
	"build_calendar",
]
