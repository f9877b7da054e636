"""Parameter packaging layer.

This package turns merged accumulators into immutable parameter records.
It powers the keyed lookup result returned by the SDK.
"""
