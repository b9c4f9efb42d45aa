"""
Grape leaf disease classifier.

HSV foliage segmentation followed by a pretrained image classifier that
picks one of four grape leaf conditions.
"""
__version__ = "1.0.0"
