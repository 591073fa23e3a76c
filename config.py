class Config:
    MAX_PATTERN_LENGTH = 100
    EPSILON_SYMBOL = "ε"
    CONCAT_SYMBOL = "·"

    DEFAULT_PATTERN = "a(b|c)*d"
    DEFAULT_TEST_STRING = "abd"

"""
Graph rendering
"""
class GraphConfig:
    GRAPH_SIZE = "8,4"
    FONT_SIZE = "10"
    RANKDIR = "LR"

    ACTIVE_COLOR = "#f59e0b"
    ACCEPTED_COLOR = "#10b981"
    FIRED_EDGE_COLOR = "#f59e0b"
    EPSILON_EDGE_COLOR = "#8b5cf6"
