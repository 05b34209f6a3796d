# run_test.py - Re=100 cavity on a 50x50 grid, sub-stepped like the animation
from simulations.lid_driven_cavity import CavitySimulation
from cavity.observables import compute_kinetic_energy

sim = CavitySimulation(resolution=50, reynolds=100, substeps=10)
print(f"Parameters: Re={sim.reynolds}, nu={sim.nu:.4f}, dt={sim.dt:.5f}")

sim.play()
for frame in range(300):
    snapshot = sim.tick()

    if (frame + 1) % 50 == 0:
        energy = compute_kinetic_energy(sim.field)
        print(f"Frame {frame+1}: t = {snapshot.time:.3f}, "
              f"max|u| = {snapshot.max_magnitude:.4f}, E = {energy:.4e}")

print(f"\nSteps: {sim.step_count}")
print(f"Simulated time: {sim.time:.3f}")
