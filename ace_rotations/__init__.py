__version__ = "0.1.0"

from ace_rotations._src.config import config
from ace_rotations._src.wigner import angular_momentum_generators, wigner_D, mlist_wigner_D
from ace_rotations._src.clebsch_gordan import (
    ClebschGordan,
    clebschgordan,
    cg_conditions,
    cg_l_condition,
    cg_m_condition,
)
from ace_rotations._src.mrange import mrange, collect_m
from ace_rotations._src.rotations3d import (
    Rot3DCoeffs,
    compute_Al,
    numerical_rank,
    ri_basis,
    gramian,
    rpi_basis,
)
from ace_rotations._src.bodyorders import b_coeff, admissible, filter_tuples
from ace_rotations._src.covariant import (
    SphericalVector,
    DIndex,
    rotation_D_matrix,
    local_cou_coe,
    covariant_gramian,
    rc_basis,
    rcpi_basis_all,
    rcpi_gramian,
    yvec_symm_basis,
)

__all__ = [
    "config",
    "angular_momentum_generators",
    "wigner_D",
    "mlist_wigner_D",
    "ClebschGordan",
    "clebschgordan",
    "cg_conditions",
    "cg_l_condition",
    "cg_m_condition",
    "mrange",
    "collect_m",
    "Rot3DCoeffs",
    "compute_Al",
    "numerical_rank",
    "ri_basis",
    "gramian",
    "rpi_basis",
    "b_coeff",
    "admissible",
    "filter_tuples",
    "SphericalVector",
    "DIndex",
    "rotation_D_matrix",
    "local_cou_coe",
    "covariant_gramian",
    "rc_basis",
    "rcpi_basis_all",
    "rcpi_gramian",
    "yvec_symm_basis",
]
