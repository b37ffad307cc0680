"""
Road graph built from a CityMap, with shortest-route waypoints.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import networkx as nx
import numpy as np

from .city_map import CityMap

ENDPOINT_EPSILON = 1.0


@dataclass
class Waypoint:
    """Route vertex with the unit heading and distance to the next one."""

    x: float
    y: float
    dir_x: float
    dir_y: float
    dist_to_next: float


class _NodeIndex:
    """Merges points closer than ``epsilon`` into the first node seen."""

    def __init__(self, epsilon: float):
        self.epsilon = epsilon
        self.coords = np.empty((16, 2), dtype=float)
        self.count = 0

    def find_or_add(self, x: float, y: float) -> Tuple[int, bool]:
        if self.count:
            deltas = self.coords[:self.count] - (x, y)
            distances = np.hypot(deltas[:, 0], deltas[:, 1])
            hits = np.flatnonzero(distances < self.epsilon)
            if len(hits):
                return int(hits[0]), False

        if self.count == len(self.coords):
            self.coords = np.resize(self.coords, (len(self.coords) * 2, 2))
        self.coords[self.count] = (x, y)
        self.count += 1
        return self.count - 1, True


def build_road_graph(city_map: CityMap, endpoint_epsilon: float = ENDPOINT_EPSILON) -> nx.Graph:
    """
    Convert segments into an undirected graph.

    Every consecutive point pair becomes an edge weighted by its length.
    Only segment vertices become nodes, so two roads that cross without
    sharing a vertex stay unconnected.

    Args:
        city_map: Source map
        endpoint_epsilon: Points closer than this share a node

    Returns:
        Graph with node attributes x, y and edge attributes length, segment_id
    """
    graph = nx.Graph()
    index = _NodeIndex(endpoint_epsilon)

    for segment in city_map:
        if len(segment.points) < 2:
            continue
        node_ids = []
        for point in segment.points:
            node_id, is_new = index.find_or_add(point.x, point.y)
            if is_new:
                graph.add_node(node_id, x=point.x, y=point.y)
            node_ids.append(node_id)

        for u, v in zip(node_ids, node_ids[1:]):
            if u == v:
                continue
            length = math.hypot(
                graph.nodes[v]["x"] - graph.nodes[u]["x"],
                graph.nodes[v]["y"] - graph.nodes[u]["y"],
            )
            if graph.has_edge(u, v) and graph.edges[u, v]["length"] <= length:
                continue
            graph.add_edge(u, v, length=length, segment_id=segment.id)

    return graph


def node_positions(graph: nx.Graph) -> Dict[int, Tuple[float, float]]:
    """{node_id: (x, y)} for plotting and metrics."""
    return {n: (data["x"], data["y"]) for n, data in graph.nodes(data=True)}


def nearest_node(graph: nx.Graph, x: float, y: float) -> Optional[int]:
    """Closest node to (x, y); None for an empty graph."""
    if graph.number_of_nodes() == 0:
        return None
    nodes = list(graph.nodes())
    coords = np.array([(graph.nodes[n]["x"], graph.nodes[n]["y"]) for n in nodes])
    distances = np.hypot(coords[:, 0] - x, coords[:, 1] - y)
    return nodes[int(np.argmin(distances))]


def compute_route(
    graph: nx.Graph,
    start: Tuple[float, float],
    dest: Tuple[float, float]
) -> Optional[List[Waypoint]]:
    """
    Shortest route between the nodes nearest to ``start`` and ``dest``.

    Args:
        graph: Graph from ``build_road_graph``
        start: (x, y) start point
        dest: (x, y) destination point

    Returns:
        Waypoints from start to destination; the last one has zero heading
        and distance. None if unreachable or both points snap to one node.
    """
    start_node = nearest_node(graph, *start)
    goal_node = nearest_node(graph, *dest)
    if start_node is None or goal_node is None:
        return None

    try:
        node_path = nx.dijkstra_path(graph, start_node, goal_node, weight="length")
    except nx.NetworkXNoPath:
        return None
    if len(node_path) < 2:
        return None

    waypoints = []
    for u, v in zip(node_path, node_path[1:]):
        a = graph.nodes[u]
        b = graph.nodes[v]
        dx = b["x"] - a["x"]
        dy = b["y"] - a["y"]
        dist = math.hypot(dx, dy)
        waypoints.append(Waypoint(a["x"], a["y"], dx / dist, dy / dist, dist))

    last = graph.nodes[node_path[-1]]
    waypoints.append(Waypoint(last["x"], last["y"], 0.0, 0.0, 0.0))
    return waypoints
