__default_conf = {
    "ri_basis_rtol": 1e-8,  # relative cutoff on the singular values of the coupling matrix
    "rpi_basis_rtol": 1e-7,  # same for the permutation Gramian
    "rc_basis_rtol": 1e-8,  # covariant Gramians
}

__conf = __default_conf.copy()


def config(name, value=None):
    if value is None:
        return __conf[name]

    if name in __conf:
        __conf[name] = value
    else:
        raise ValueError("Unknown configuration option: {}".format(name))
