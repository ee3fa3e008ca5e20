import dataclasses

import pytest

import balance_config as bc
import golfer_profiles as gp


def test_editing_an_override_table_leaves_defaults_alone():
    tuned = bc.get_config(dispersion_ramp=3.0)

    tuned.landing_penalty_strokes["sand"] = 9.9
    tuned.golfer_bags["SCRATCH"]["clubs"].append(("Hybrid", 215, 1.2))

    assert tuned.penalty_for("sand") == 9.9
    assert bc.DEFAULT_BALANCE.penalty_for("sand") == 0.6
    assert len(bc.DEFAULT_BALANCE.club_table("SCRATCH")) == len(bc.SCRATCH_BAG)
    assert len(gp.get_golfer_profile(gp.SCRATCH).clubs) == len(bc.SCRATCH_BAG)


def test_get_config_without_overrides_is_an_independent_copy():
    config = bc.get_config()

    assert config == bc.DEFAULT_BALANCE
    assert config is not bc.DEFAULT_BALANCE
    assert config.landing_penalty_strokes is not bc.DEFAULT_BALANCE.landing_penalty_strokes
    assert config.golfer_bags is not bc.DEFAULT_BALANCE.golfer_bags


def test_config_fields_cannot_be_reassigned():
    with pytest.raises(dataclasses.FrozenInstanceError):
        bc.DEFAULT_BALANCE.dispersion_ramp = 5.0

    tuned = bc.get_config(max_expansions=10)
    with pytest.raises(dataclasses.FrozenInstanceError):
        tuned.max_expansions = 20


def test_overrides_apply_only_to_the_named_knobs():
    tuned = bc.get_config(carry_buffer_yards=25.0)

    assert tuned.carry_buffer_yards == 25.0
    assert tuned.dispersion_ramp == bc.DEFAULT_BALANCE.dispersion_ramp
    assert bc.DEFAULT_BALANCE.carry_buffer_yards == 10.0


def test_penalty_lookup_defaults_to_zero():
    assert bc.DEFAULT_BALANCE.penalty_for("lava") == 0.0
    assert bc.DEFAULT_BALANCE.penalty_for("water") == 2.6
