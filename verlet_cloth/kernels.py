"""
Warp kernels for cloth simulation.

Per-particle and per-triangle work launches one thread per element. Constraint
relaxation and incremental normal accumulation depend on the order in which
elements are processed, so those kernels are launched with dim=1 and loop
sequentially.

Note: Kernels must be defined at module level (not inside classes) per Warp requirements.
"""

import warp as wp


@wp.kernel
def zero_vec3(a: wp.array(dtype=wp.vec3)):
    """Zero out a vec3 array.

    Args:
        a: Array to zero out (modified in place).
    """
    i = wp.tid()
    a[i] = wp.vec3(0.0, 0.0, 0.0)


@wp.kernel
def rest_lengths(
    pos: wp.array(dtype=wp.vec3),
    pairs: wp.array2d(dtype=wp.int32),
    rest: wp.array(dtype=wp.float32),
):
    """Measure the current distance of every constraint pair.

    Args:
        pos: Particle positions.
        pairs: Constraint connectivity (N x 2 array of particle indices).
        rest: Output rest lengths.
    """
    e = wp.tid()
    rest[e] = wp.length(pos[pairs[e, 0]] - pos[pairs[e, 1]])


@wp.kernel
def relax_constraints(
    pos: wp.array(dtype=wp.vec3),
    movable: wp.array(dtype=wp.int32),
    pairs: wp.array2d(dtype=wp.int32),
    rest: wp.array(dtype=wp.float32),
    iterations: int,
    min_length: float,
):
    """Gauss-Seidel relaxation of every distance constraint.

    Each constraint moves its two particles halfway towards the rest
    distance; a pinned particle ignores its half. Later constraints read the
    positions written by earlier ones within the same pass.
    Should be launched with dim=1 (single thread).

    Args:
        pos: Particle positions (modified in place).
        movable: Pin mask (1 = free, 0 = pinned).
        pairs: Constraint connectivity (N x 2 array of particle indices).
        rest: Rest length of each constraint.
        iterations: Number of full passes over the constraints.
        min_length: Distances at or below this skip the correction.
    """
    num_pairs = pairs.shape[0]
    for it in range(iterations):
        for e in range(num_pairs):
            i = pairs[e, 0]
            j = pairs[e, 1]
            d = pos[j] - pos[i]
            length = wp.length(d)
            if length > min_length:
                correction = d * (1.0 - rest[e] / length) * 0.5
                if movable[i] == 1:
                    pos[i] = pos[i] + correction
                if movable[j] == 1:
                    pos[j] = pos[j] - correction


@wp.kernel
def wind_forces(
    pos: wp.array(dtype=wp.vec3),
    tris: wp.array2d(dtype=wp.int32),
    masses: wp.array(dtype=wp.float32),
    direction: wp.vec3,
    min_length: float,
    f: wp.array(dtype=wp.vec3),
):
    """Push every triangle along its face normal.

    The force is the unnormalized normal (twice the triangle area) scaled by
    the cosine between the face and the wind, so larger faces catch more wind.

    Args:
        pos: Particle positions.
        tris: Triangles (N x 3 array of particle indices).
        masses: Mass of each particle.
        direction: Wind direction and strength.
        min_length: Degenerate triangles with a shorter normal are skipped.
        f: Force accumulator, force / mass (modified via atomic_add).
    """
    t = wp.tid()
    a = tris[t, 0]
    b = tris[t, 1]
    c = tris[t, 2]

    normal = wp.cross(pos[b] - pos[a], pos[c] - pos[a])
    length = wp.length(normal)
    if length <= min_length:
        return

    force = normal * wp.dot(normal / length, direction)
    wp.atomic_add(f, a, force / masses[a])
    wp.atomic_add(f, b, force / masses[b])
    wp.atomic_add(f, c, force / masses[c])


@wp.kernel
def integrate(
    pos: wp.array(dtype=wp.vec3),
    prev: wp.array(dtype=wp.vec3),
    forces: wp.array(dtype=wp.vec3),
    masses: wp.array(dtype=wp.float32),
    damping: wp.array(dtype=wp.float32),
    movable: wp.array(dtype=wp.int32),
    gravity: wp.vec3,
    use_gravity: int,
    dt: float,
):
    """Apply gravity and advance particles with damped Verlet integration.

    x_new = x + (x - x_prev) * (1 - damping) + f * dt

    Args:
        pos: Particle positions (modified in place).
        prev: Previous positions (modified in place).
        forces: Accumulated force / mass (reset to zero).
        masses: Mass of each particle.
        damping: Damping factor of each particle.
        movable: Pin mask (1 = free, 0 = pinned).
        gravity: Gravity vector.
        use_gravity: 1 to add gravity * dt before integrating.
        dt: Time step.
    """
    i = wp.tid()

    acc = forces[i]
    if use_gravity == 1:
        acc = acc + gravity * dt / masses[i]

    # Pinned particles don't move
    if movable[i] == 1:
        x = pos[i]
        pos[i] = x + (x - prev[i]) * (1.0 - damping[i]) + acc * dt
        prev[i] = x

    forces[i] = wp.vec3(0.0, 0.0, 0.0)


@wp.kernel
def sphere_collision(
    pos: wp.array(dtype=wp.vec3),
    movable: wp.array(dtype=wp.int32),
    center: wp.vec3,
    radius: float,
    min_length: float,
):
    """Project particles inside a sphere onto its surface.

    Args:
        pos: Particle positions (modified in place).
        movable: Pin mask (1 = free, 0 = pinned).
        center: Sphere center.
        radius: Sphere radius.
        min_length: Particles this close to the center have no push direction
            and stay put.
    """
    i = wp.tid()
    if movable[i] == 0:
        return

    d = pos[i] - center
    length = wp.length(d)
    if length < radius:
        if length > min_length:
            pos[i] = pos[i] + d / length * (radius - length)


@wp.func
def face_normal(
    pos: wp.array(dtype=wp.vec3),
    a: int,
    b: int,
    c: int,
    min_length: float,
):
    """Normalized face normal of triangle (a, b, c), zero when degenerate."""
    normal = wp.cross(pos[b] - pos[a], pos[c] - pos[a])
    length = wp.length(normal)
    result = wp.vec3(0.0, 0.0, 0.0)
    if length > min_length:
        result = normal / length
    return result


@wp.kernel
def mesh_incremental(
    pos: wp.array(dtype=wp.vec3),
    tris: wp.array2d(dtype=wp.int32),
    min_length: float,
    normals: wp.array(dtype=wp.vec3),
    out_pos: wp.array(dtype=wp.vec3),
    out_nrm: wp.array(dtype=wp.vec3),
):
    """Emit the triangle list, reading back normals while they accumulate.

    Each emitted vertex normal is the sum of the face normals processed so far
    at that particle, not the final sum.
    Should be launched with dim=1 (single thread) after zeroing ``normals``.

    Args:
        pos: Particle positions.
        tris: Triangles (N x 3 array of particle indices).
        min_length: Degenerate triangles contribute a zero normal.
        normals: Per-particle normal accumulator (modified in place).
        out_pos: Output vertex positions, 3 per triangle.
        out_nrm: Output vertex normals, 3 per triangle.
    """
    for t in range(tris.shape[0]):
        n = face_normal(pos, tris[t, 0], tris[t, 1], tris[t, 2], min_length)
        for k in range(3):
            v = tris[t, k]
            normals[v] = normals[v] + n
        for k in range(3):
            v = tris[t, k]
            out_pos[t * 3 + k] = pos[v]
            out_nrm[t * 3 + k] = normals[v]


@wp.kernel
def accumulate_normals(
    pos: wp.array(dtype=wp.vec3),
    tris: wp.array2d(dtype=wp.int32),
    min_length: float,
    normals: wp.array(dtype=wp.vec3),
):
    """Sum normalized face normals into per-particle normals.

    Args:
        pos: Particle positions.
        tris: Triangles (N x 3 array of particle indices).
        min_length: Degenerate triangles contribute a zero normal.
        normals: Per-particle normal accumulator (modified via atomic_add).
    """
    t = wp.tid()
    n = face_normal(pos, tris[t, 0], tris[t, 1], tris[t, 2], min_length)
    for k in range(3):
        wp.atomic_add(normals, tris[t, k], n)


@wp.kernel
def mesh_smooth(
    pos: wp.array(dtype=wp.vec3),
    tris: wp.array2d(dtype=wp.int32),
    normals: wp.array(dtype=wp.vec3),
    min_length: float,
    out_pos: wp.array(dtype=wp.vec3),
    out_nrm: wp.array(dtype=wp.vec3),
):
    """Emit the triangle list with fully accumulated, normalized normals.

    Args:
        pos: Particle positions.
        tris: Triangles (N x 3 array of particle indices).
        normals: Per-particle normal sums from ``accumulate_normals``.
        min_length: Normal sums this short are emitted as zero.
        out_pos: Output vertex positions, 3 per triangle.
        out_nrm: Output vertex normals, 3 per triangle.
    """
    t = wp.tid()
    for k in range(3):
        v = tris[t, k]
        total = normals[v]
        length = wp.length(total)
        n = wp.vec3(0.0, 0.0, 0.0)
        if length > min_length:
            n = total / length
        out_pos[t * 3 + k] = pos[v]
        out_nrm[t * 3 + k] = n
