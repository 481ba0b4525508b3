"""
Wiki BFS - Core Library

Single-source shortest hop-distances over the Wikipedia link graph, computed
as a sequence of stateless map/reduce passes.
"""

from .types import Color, INFINITE_DISTANCE, VertexRecord, PipelineState, PipelineResult

__all__ = ['Color', 'INFINITE_DISTANCE', 'VertexRecord', 'PipelineState', 'PipelineResult']
