import numpy as np
import pytest

from parallax_aim.control.mount import MuzzleMount, Turret
from parallax_aim.control.pose import Pose, identity_pose
from parallax_aim.math3d.quaternion import euler_yaw_pitch_roll_to_q, q_angle_deg


def test_identity_pose_faces_forward():
    pose = identity_pose()
    np.testing.assert_allclose(pose.forward(), np.array([0.0, 0.0, 1.0]))


def test_pose_normalizes_quaternion_and_copies_position():
    position = np.array([1.0, 2.0, 3.0], dtype=np.float64)
    pose = Pose(position=position, quaternion=np.array([2.0, 0.0, 0.0, 0.0]))
    position[0] = 99.0
    np.testing.assert_allclose(pose.quaternion, np.array([1.0, 0.0, 0.0, 0.0]))
    assert pose.position[0] == 1.0


def test_pose_rejects_bad_shapes():
    with pytest.raises(ValueError, match="position"):
        Pose(position=np.zeros(2), quaternion=np.array([1.0, 0.0, 0.0, 0.0]))
    with pytest.raises(ValueError, match="quaternion"):
        Pose(position=np.zeros(3), quaternion=np.zeros(3))


def test_inverse_transform_direction_undoes_rotation():
    pose = Pose(position=np.zeros(3), quaternion=euler_yaw_pitch_roll_to_q(90.0, 0.0, 0.0))
    local = pose.inverse_transform_direction(np.array([1.0, 0.0, 0.0]))
    np.testing.assert_allclose(local, np.array([0.0, 0.0, 1.0]), atol=1e-9)


def test_mount_follows_pivot_rotation():
    pivot = Pose(
        position=np.array([1.0, 0.0, 0.0]),
        quaternion=euler_yaw_pitch_roll_to_q(90.0, 0.0, 0.0),
    )
    mount = MuzzleMount(
        local_position=np.array([0.0, 0.0, 2.0]),
        local_rotation=euler_yaw_pitch_roll_to_q(10.0, 0.0, 0.0),
    )
    muzzle = mount.world_pose(pivot)
    np.testing.assert_allclose(muzzle.position, np.array([3.0, 0.0, 0.0]), atol=1e-9)
    assert q_angle_deg(muzzle.quaternion, euler_yaw_pitch_roll_to_q(100.0, 0.0, 0.0)) < 1e-6


def test_turret_without_members_has_no_muzzle():
    assert Turret(pivot=None, mount=MuzzleMount(np.zeros(3))).muzzle_pose() is None
    assert Turret(pivot=identity_pose(), mount=None).muzzle_pose() is None


def test_turret_set_orientation_keeps_position():
    turret = Turret(
        pivot=Pose(position=np.array([0.0, 1.0, 0.0]), quaternion=np.array([1.0, 0.0, 0.0, 0.0])),
        mount=MuzzleMount(np.array([0.5, 0.0, 0.0])),
    )
    q = euler_yaw_pitch_roll_to_q(45.0, 0.0, 0.0)
    turret.set_orientation(q)
    np.testing.assert_allclose(turret.pivot.position, np.array([0.0, 1.0, 0.0]))
    np.testing.assert_allclose(turret.pivot.quaternion, q)


def test_turret_set_orientation_requires_pivot():
    turret = Turret(pivot=None, mount=None)
    with pytest.raises(RuntimeError):
        turret.set_orientation(np.array([1.0, 0.0, 0.0, 0.0]))
