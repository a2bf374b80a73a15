"""
Demo runner for the matching engine.

Usage:
    python -m matching.run --config configs/config.yaml

The demo performs the following steps:
1. Load and validate configuration
2. Generate a synthetic candidate pool
3. Match the demo seeker against the pool and report the decision
4. Optionally match a batch of seekers against the same pool
5. Optionally save the report and per-candidate details
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Dict, Any, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

DEMO_SEEKER_ID = "user123"


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def build_demo_seeker():
    """The seeker used by the demo: three mics, 50 viewers, waiting 80s."""
    from .entities import Entity

    return Entity(
        entity_id="current",
        mic_count=3,
        audience_count=50,
        wait_seconds=80
    )


def run_demo(
    config_path: str,
    pool_size: Optional[int] = None,
    n_seekers: Optional[int] = None,
    seed: Optional[int] = None,
    output_dir: Optional[str] = None
) -> Dict[str, Any]:
    """
    Run the matching demo.

    Args:
        config_path: Path to the configuration YAML file
        pool_size: Overrides pool_generation.size
        n_seekers: Overrides batch.n_seekers (0 skips the batch step)
        seed: Overrides global.random_seed
        output_dir: Where to write the report and details (defaults to global.output_dir)

    Returns:
        Dictionary with the match result, statistics and batch mapping
    """
    from .configs import load_config, validate_config, get_config_value
    from .entities import MatchConfig
    from .engine import Matcher, create_batch_matcher_from_config
    from .evaluation import create_match_report, compute_pool_statistics, details_to_frame
    from .pool_generation import PoolGenerator

    logger.info("=" * 60)
    logger.info("CO-BROADCAST MATCHING DEMO")
    logger.info("=" * 60)

    config = load_config(config_path)
    issues = validate_config(config)
    if issues:
        for issue in issues:
            logger.warning(f"Config issue: {issue}")

    setup_logging(get_config_value(config, "global.log_level", "INFO"))

    if seed is None:
        seed = get_config_value(config, "global.random_seed")
    if pool_size is None:
        pool_size = get_config_value(config, "pool_generation.size", 100)
    if n_seekers is None:
        n_seekers = get_config_value(config, "batch.n_seekers", 0)
    top_n = get_config_value(config, "report.top_n", 5)
    effective_output_dir = output_dir or get_config_value(config, "global.output_dir")

    match_config = MatchConfig.from_config(config)
    current_time = int(time.time())

    # =========================================================================
    # 1. Generate pool
    # =========================================================================
    logger.info(f"Generating {pool_size} random entities...")
    generator = PoolGenerator.from_config(config, random_seed=seed)
    pool = generator.generate_pool(pool_size, current_time)

    # =========================================================================
    # 2. Detailed match for the demo seeker
    # =========================================================================
    seeker = build_demo_seeker()
    logger.info(f"Matching entity {seeker.entity_id}...")

    matcher = Matcher(match_config, random_state=seed)
    selected, details = matcher.match_detailed(seeker, pool, DEMO_SEEKER_ID, current_time)

    report = create_match_report(seeker, selected, details, top_n=top_n)
    logger.info("\n" + report.summary())
    stats = compute_pool_statistics(details)

    # =========================================================================
    # 3. Batch match
    # =========================================================================
    batch_results = {}
    if n_seekers > 0:
        logger.info("\n" + "=" * 60)
        logger.info(f"BATCH MATCH ({n_seekers} seekers)")
        logger.info("=" * 60)

        seeker_generator = PoolGenerator.from_config(
            config, random_seed=None if seed is None else seed + 1000
        )
        seeker_generator.id_prefix = "seeker"
        seekers = seeker_generator.generate_pool(n_seekers, current_time)
        seeker_ids = [f"user{i}" for i in range(n_seekers)]

        batch_matcher = create_batch_matcher_from_config(config, random_state=seed)
        matched = batch_matcher.batch_match(seekers, pool, seeker_ids, current_time)
        for seeker_entity in seekers:
            partner = matched.get(seeker_entity.entity_id)
            logger.info(f"  {seeker_entity.entity_id} -> {partner.entity_id if partner else 'no match'}")
        batch_results = {k: v.entity_id for k, v in matched.items()}

    # =========================================================================
    # 4. Save outputs
    # =========================================================================
    if effective_output_dir:
        out = Path(effective_output_dir)
        out.mkdir(parents=True, exist_ok=True)
        report.save(str(out / "match_report.json"))
        details_to_frame(details).to_csv(out / "match_details.csv", index=False)
        match_config.save(str(out / "match_config.json"))
        if batch_results:
            with open(out / "batch_results.json", "w") as f:
                json.dump(batch_results, f, indent=2)
        logger.info(f"Outputs written to {out}")

    return {
        "success": True,
        "selected_id": selected.entity_id if selected else None,
        "statistics": stats.to_dict(),
        "batch_results": batch_results
    }


def main():
    """Main entry point for the demo."""
    parser = argparse.ArgumentParser(
        description="Run the co-broadcast matching demo"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--pool-size",
        type=int,
        default=None,
        help="Number of candidates to generate (overrides config)"
    )
    parser.add_argument(
        "--seekers",
        type=int,
        default=None,
        help="Number of seekers in the batch demo, 0 to skip (overrides config)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (overrides config)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for the JSON report and CSV details (overrides config)"
    )

    args = parser.parse_args()

    try:
        result = run_demo(
            args.config,
            pool_size=args.pool_size,
            n_seekers=args.seekers,
            seed=args.seed,
            output_dir=args.output_dir
        )
        if result["success"]:
            logger.info("\nDemo completed successfully!")
            return 0
        else:
            logger.error("\nDemo failed!")
            return 1
    except Exception as e:
        logger.exception(f"Demo failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
