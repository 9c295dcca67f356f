"""
Great-circle distance and travel-time matrix.

Distances are haversine kilometres between WGS84 points. Travel time is a
deterministic estimate: distance divided by a configurable average speed,
rounded to whole minutes. It is not traffic-aware.
"""

from typing import Optional, Sequence, Tuple, TYPE_CHECKING

import networkx as nx
import numpy as np

if TYPE_CHECKING:
    from ..core.problem import RouteProblem

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in km."""
    phi1, phi2 = np.radians(lat1), np.radians(lat2)
    d_phi = phi2 - phi1
    d_lam = np.radians(lng2 - lng1)
    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lam / 2) ** 2
    return float(2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0))))


def _pairwise_haversine(coords: np.ndarray) -> np.ndarray:
    """Symmetric (n, n) haversine matrix for an (n, 2) array of lat/lng degrees."""
    rad = np.radians(coords)
    lat = rad[:, 0]
    lng = rad[:, 1]
    d_phi = lat[np.newaxis, :] - lat[:, np.newaxis]
    d_lam = lng[np.newaxis, :] - lng[:, np.newaxis]
    a = (
        np.sin(d_phi / 2) ** 2
        + np.cos(lat)[:, np.newaxis] * np.cos(lat)[np.newaxis, :] * np.sin(d_lam / 2) ** 2
    )
    dist = 2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))
    # Enforce exact symmetry and a zero diagonal despite float noise.
    dist = (dist + dist.T) / 2.0
    np.fill_diagonal(dist, 0.0)
    return dist


class GeoDistanceMatrix:
    """
    Precomputed pairwise distance and travel time between all nodes.

    Node 0 is the start location, nodes 1..N the candidate places. The
    matrix is built once per optimization and shared by every strategy.

    Attributes:
        distances: (n, n) array of km
        times: (n, n) array of whole travel minutes
        speed_kmh: Average speed used for the time estimate
    """

    def __init__(self, coordinates: Sequence[Tuple[float, float]], speed_kmh: float):
        """
        Build the matrix.

        Args:
            coordinates: (lat, lng) per node, start first
            speed_kmh: Average travel speed (> 0)
        """
        if speed_kmh <= 0:
            raise ValueError("speed_kmh must be positive")
        coords = np.asarray(coordinates, dtype=float).reshape(-1, 2)

        self.speed_kmh = float(speed_kmh)
        self.distances = _pairwise_haversine(coords)
        self.times = np.rint(self.distances / self.speed_kmh * 60.0)
        self.distances.setflags(write=False)
        self.times.setflags(write=False)

        # Cheapest way into each node from any other node, for search bounds.
        masked_d = self.distances + np.diag(np.full(len(coords), np.inf))
        masked_t = self.times + np.diag(np.full(len(coords), np.inf))
        if len(coords) > 1:
            self.min_incoming_distance = masked_d.min(axis=0)
            self.min_incoming_time = masked_t.min(axis=0)
            self.max_incoming_distance = self.distances.max(axis=0)
        else:
            self.min_incoming_distance = np.zeros(len(coords))
            self.min_incoming_time = np.zeros(len(coords))
            self.max_incoming_distance = np.zeros(len(coords))

    @classmethod
    def for_problem(cls, problem: "RouteProblem") -> "GeoDistanceMatrix":
        return cls(problem.coordinates(), problem.config.average_speed_kmh)

    @property
    def size(self) -> int:
        return self.distances.shape[0]

    def distance(self, a: int, b: int) -> float:
        """Distance in km between nodes a and b."""
        return float(self.distances[a, b])

    def travel_time(self, a: int, b: int) -> float:
        """Estimated travel minutes between nodes a and b."""
        return float(self.times[a, b])

    def route_distance(self, nodes: Sequence[int], start: Optional[int] = 0) -> float:
        """Total distance of visiting nodes in order, optionally from start."""
        path = ([start] if start is not None else []) + list(nodes)
        return float(sum(self.distances[u, v] for u, v in zip(path, path[1:])))

    def as_graph(self) -> nx.Graph:
        """
        Export the matrix as a complete networkx graph.

        Edges carry "dist" (km) and "time" (minutes) attributes.
        """
        G = nx.Graph()
        n = self.size
        G.add_nodes_from(range(n))
        for u in range(n):
            for v in range(u + 1, n):
                G.add_edge(
                    u, v, dist=float(self.distances[u, v]), time=float(self.times[u, v])
                )
        return G

    def spanning_tree_distance(self, nodes: Optional[Sequence[int]] = None) -> float:
        """Weight of a minimum spanning tree over nodes (all nodes by default)."""
        G = self.as_graph()
        if nodes is not None:
            G = G.subgraph(nodes)
        mst = nx.minimum_spanning_tree(G, weight="dist")
        return float(mst.size(weight="dist"))

    def __repr__(self) -> str:
        return f"GeoDistanceMatrix(n={self.size}, speed={self.speed_kmh}km/h)"
