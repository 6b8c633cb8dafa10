#!/usr/bin/env python3
"""Direct run of a small ring to check it stays finite and watch it settle."""

import numpy as np
from blobs.metrics import is_finite, kinetic_energy, mean_edge_length, mean_radius
from blobs.ring import new_ring
from blobs.simulation import advance

CENTER = (500.0, 500.0)
DT = 0.01

# Same setup as the smallest visible blob
ring = new_ring(3, 100.0, CENTER)

print("Initial state:")
print(f"  Position 0: {ring.positions[0]}")
print(f"  Velocity 0: {ring.velocities[0]}")
print()

# Run simulation for 1000 ticks
for i in range(1000):
    advance(ring, DT, CENTER)
    if i % 100 == 99:
        print(f"Tick {i+1}: pos={ring.positions[0]}, vel={ring.velocities[0]}, "
              f"radius={mean_radius(ring):.3f}, edge={mean_edge_length(ring):.3f}")

print(f"\nFinal state after 1000 ticks:")
print(f"  Position 0: {ring.positions[0]}")
print(f"  Velocity 0: {ring.velocities[0]}")
print(f"  Finite: {is_finite(ring)}")

vel_mags = np.linalg.norm(ring.velocities, axis=1)
print(f"\nKinetic energy: {kinetic_energy(ring):.2f}")
print(f"Max velocity magnitude: {vel_mags.max():.2f}")
print(f"Min velocity magnitude: {vel_mags.min():.2f}")
