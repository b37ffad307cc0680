"""
Summary metrics for a generated or loaded city map.
"""

from collections import Counter
from typing import Dict, List, Tuple

import networkx as nx
import numpy as np
from shapely.geometry import LineString

from .city_map import CityMap, RoadSegment
from .road_graph import ENDPOINT_EPSILON, build_road_graph


class SegmentMetrics:
    """Per-segment geometry metrics."""

    @staticmethod
    def segment_length(segment: RoadSegment) -> float:
        """Polyline length in meters."""
        return LineString(segment.points).length

    @staticmethod
    def compute_segment_lengths(city_map: CityMap) -> List[float]:
        return [SegmentMetrics.segment_length(s) for s in city_map]

    @staticmethod
    def count_runs(city_map: CityMap) -> Tuple[int, int]:
        """
        Count straight runs by orientation.

        Returns:
            (horizontal_runs, vertical_runs)
        """
        horizontal = 0
        vertical = 0
        for segment in city_map:
            deltas = np.diff(segment.as_array(), axis=0)
            horizontal += int(np.count_nonzero(deltas[:, 1] == 0.0))
            vertical += int(np.count_nonzero(deltas[:, 0] == 0.0))
        return horizontal, vertical


class GraphMetrics:
    """Connectivity metrics over the road graph."""

    @staticmethod
    def compute_degree_distribution(graph: nx.Graph) -> Dict[int, int]:
        """
        Compute node degree distribution.

        Args:
            graph: NetworkX graph

        Returns:
            Dict mapping degree -> count
        """
        degrees = [d for _, d in graph.degree()]
        return dict(Counter(degrees))

    @staticmethod
    def compute_dead_end_ratio(graph: nx.Graph) -> float:
        """Ratio [0, 1] of degree-1 nodes."""
        if graph.number_of_nodes() == 0:
            return 0.0

        dead_ends = sum(1 for _, d in graph.degree() if d == 1)
        return dead_ends / graph.number_of_nodes()

    @staticmethod
    def compute_component_count(graph: nx.Graph) -> int:
        if graph.number_of_nodes() == 0:
            return 0
        return nx.number_connected_components(graph)


def compute_map_metrics(city_map: CityMap, endpoint_epsilon: float = ENDPOINT_EPSILON) -> Dict:
    """
    Compute all map metrics.

    Args:
        city_map: Map to summarize
        endpoint_epsilon: Node merge distance for the road graph

    Returns:
        Dict of JSON-friendly metric values
    """
    lengths = SegmentMetrics.compute_segment_lengths(city_map)
    horizontal, vertical = SegmentMetrics.count_runs(city_map)
    graph = build_road_graph(city_map, endpoint_epsilon)

    return {
        "segment_count": len(city_map),
        "point_count": sum(s.point_count for s in city_map),
        "total_length_m": float(np.sum(lengths)) if lengths else 0.0,
        "mean_segment_length_m": float(np.mean(lengths)) if lengths else 0.0,
        "horizontal_runs": horizontal,
        "vertical_runs": vertical,
        "bounds": list(city_map.compute_bounds()),
        "graph_nodes": graph.number_of_nodes(),
        "graph_edges": graph.number_of_edges(),
        "degree_distribution": GraphMetrics.compute_degree_distribution(graph),
        "dead_end_ratio": GraphMetrics.compute_dead_end_ratio(graph),
        "connected_components": GraphMetrics.compute_component_count(graph),
    }


def format_metrics_report(metrics: Dict) -> str:
    """Plain-text summary for the command line."""
    min_x, min_y, max_x, max_y = metrics["bounds"]
    lines = [
        f"Segments:        {metrics['segment_count']}",
        f"Points:          {metrics['point_count']}",
        f"Total length:    {metrics['total_length_m']:.1f} m",
        f"Mean length:     {metrics['mean_segment_length_m']:.1f} m",
        f"Runs (H/V):      {metrics['horizontal_runs']}/{metrics['vertical_runs']}",
        f"Bounds:          ({min_x:.1f}, {min_y:.1f}) - ({max_x:.1f}, {max_y:.1f})",
        f"Graph:           {metrics['graph_nodes']} nodes, {metrics['graph_edges']} edges",
        f"Components:      {metrics['connected_components']}",
        f"Dead-end ratio:  {metrics['dead_end_ratio']:.3f}",
    ]
    for degree in sorted(metrics["degree_distribution"]):
        lines.append(f"  degree {degree}:      {metrics['degree_distribution'][degree]}")
    return "\n".join(lines)
