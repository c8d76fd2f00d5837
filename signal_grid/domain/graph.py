import networkx as nx
from typing import Dict, Any, List, Tuple

class RoadNetwork:
    def __init__(self):
        self.graph = nx.DiGraph()

    def add_intersection(self, intersection_id: str, pos: Tuple[float, float]):
        self.graph.add_node(intersection_id, pos=pos, type="intersection")

    def add_road(self, u: str, v: str, length: float, axis: str, name: str, approach: str):
        # `approach` is the arm of `v` that traffic on this edge arrives through
        self.graph.add_edge(u, v, length=length, axis=axis, name=name, approach=approach)

    def get_edge_data(self, u: str, v: str) -> Dict[str, Any]:
        return self.graph.get_edge_data(u, v)

    def get_node_pos(self, u: str) -> Tuple[float, float]:
        return self.graph.nodes[u].get('pos', (0.0, 0.0))

    def neighbors(self, u: str) -> List[str]:
        if u not in self.graph:
            return []
        return sorted(set(self.graph.successors(u)) | set(self.graph.predecessors(u)))

    def roads(self) -> List[Tuple[str, str, Dict[str, Any]]]:
        return list(self.graph.edges(data=True))
