"""
Benchmark suite for instajson parsing performance.

Compares ``instajson.parse`` against the standard library json, orjson and
ujson on strict documents, and measures the cost of lenient preprocessing
and duplicate key tracking on documents only instajson accepts.
"""
