"""
Send one two-phase particle between ranks and rebuild it on the receiver.

    mpirun -n 2 python send_receive.py     # rank 0 -> rank 1
    python send_receive.py                 # single process, loopback
"""
import os
import sys

# Add the package sources to the Python path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))), "src"))

from mpm3d import TwoPhaseParticle, ParticlePhase, configure_logging, create_material
from mpm3d import recv_particle, send_particle, LoopbackTransport, TwoPhaseParticleRecord
from mpm3d.materials import MaterialRegistry
from mpm3d.transport import ExchangeConfig

# =====================================
# Material Definitions
# =====================================
solid_properties = {
    "density": 1000.,
    "youngs_modulus": 1.0E+7,
    "poisson_ratio": 0.3,
    "porosity": 0.3,
    "k_x": 0.001,
    "k_y": 0.001,
    "k_z": 0.001,
}
liquid_properties = {
    "density": 1000.,
    "bulk_modulus": 2.0E9,
    "dynamic_viscosity": 8.90E-4,
}


def make_transport():
    """MPI when launched under mpirun with mpi4py installed, loopback otherwise."""
    if "OMPI_COMM_WORLD_SIZE" in os.environ or "PMI_SIZE" in os.environ:
        from mpm3d.transport.mpi import MPITransport
        return MPITransport()
    return LoopbackTransport()


def make_materials():
    return MaterialRegistry([
        create_material("LinearElastic3D", 1, solid_properties),
        create_material("Newtonian3D", 2, liquid_properties),
    ])


def make_particle(materials):
    particle = TwoPhaseParticle(13, [1., 2., 3.])
    particle.assign_material(materials[1], ParticlePhase.SOLID)
    particle.assign_material(materials[2], ParticlePhase.LIQUID)
    particle.assign_volume(2.0)
    particle.assign_mass(501.5)
    particle.assign_velocity([1.5, 2.5, 3.5])
    particle.assign_stress([11.5, -12.5, 13.5, 14.5, -15.5, 16.5])
    particle.assign_cell_id(1)
    particle.assign_liquid_mass(100.1)
    particle.assign_liquid_velocity([5.5, 2.1, 4.2])
    particle.assign_porosity(0.33)
    return particle


def main():
    configure_logging()
    transport = make_transport()
    config = ExchangeConfig.for_world(transport.size)
    materials = make_materials()

    if config.is_sender(transport.rank):
        particle = make_particle(materials)
        send_particle(transport, particle.to_record(), config.receiver, config.tag)
        print(f"Rank {transport.rank}: sent particle {particle.id} to rank {config.receiver}")

    if config.is_receiver(transport.rank):
        record = recv_particle(transport, TwoPhaseParticleRecord, config.sender, config.tag)
        particle = TwoPhaseParticle(record.id, [0., 0., 0.])
        if not particle.initialise_particle(record, materials):
            sys.exit(f"Rank {transport.rank}: particle {record.id} could not be reconstructed")
        print(f"Rank {transport.rank}: received particle {particle.id}, "
              f"mass density = {particle.mass_density}, porosity = {particle.porosity}")


if __name__ == '__main__':
    main()
