"""
Console reporting over exported wormhole graphs.

The reporter only consumes ``stats()`` and ``export_graph()`` snapshots;
it never touches engine internals.
"""

import math
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .core.types import GraphEdge, GraphExport, MultiverseStats


def _fmt(value: float, spec: str = ".3f") -> str:
    if math.isinf(value):
        return "∞"
    return format(value, spec)


class WormholeReporter:
    """Renders corpus statistics and strongest bridges as rich tables."""
    
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
    
    def display_stats(self, stats: MultiverseStats) -> None:
        """Display aggregate statistics."""
        table = Table(title="Multiverse Statistics")
        
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="magenta", justify="right")
        
        table.add_row("Code souls", str(stats['total_items']))
        table.add_row("Wormholes", str(stats['total_connections']))
        table.add_row("Average similarity", _fmt(stats['average_similarity']))
        table.add_row("Max similarity", _fmt(stats['max_similarity']))
        table.add_row("Stable wormholes", str(stats['stable_connections']))
        table.add_row("Resonant pairs", str(stats['resonant_pairs']))
        table.add_row("Connection density", _fmt(stats['connection_density']))
        
        self.console.print(table)
    
    def display_edges(self, edges: List[GraphEdge], title: str = "Strongest Wormholes",
                      limit: int = 10) -> None:
        """Display edges ordered by descending similarity."""
        if not edges:
            self.console.print("[yellow]No wormholes found[/yellow]")
            return
        
        ranked = sorted(edges, key=lambda e: e['similarity'], reverse=True)
        
        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("Source", style="cyan")
        table.add_column("Target", style="yellow")
        table.add_column("Similarity", justify="right", style="green")
        table.add_column("Distance", justify="right")
        table.add_column("Energy", justify="right")
        table.add_column("Stability", justify="right")
        table.add_column("Resonance", justify="right")
        
        for edge in ranked[:limit]:
            stability_color = "green" if edge['stability'] > 0.8 else "yellow"
            table.add_row(
                edge['source'],
                edge['target'],
                _fmt(edge['similarity'], ".4f"),
                _fmt(edge['distance']),
                _fmt(edge['energy']),
                f"[{stability_color}]{_fmt(edge['stability'])}[/{stability_color}]",
                _fmt(edge['resonance']),
            )
        
        if len(ranked) > limit:
            table.add_row("", f"... and {len(ranked) - limit} more", "", "", "", "", "")
        
        self.console.print(table)
    
    def render(self, stats: MultiverseStats, graph: GraphExport, top: int = 10) -> None:
        """Full report: statistics followed by the strongest wormholes."""
        self.display_stats(stats)
        self.display_edges(graph['edges'], limit=top)
