"""Core animation engines for dotmorph.

Modules:
- masks: shape mask protocol + safe batch evaluation
- tiers: weighted fade-tier sampling
- lattice: centered dot grid with per-row fade profiles
- grid_wave: sweep transitions between shape masks
- particles: silhouette sampling into a particle field
- physics: pointer repulsion / spring-to-home step
- shapes, sequencer: chart masks and the loop that cycles them
"""
