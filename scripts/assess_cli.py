#!/usr/bin/env python3
"""
CLI tool for the entity assessment
Answer traits from flags (or interactively) and optionally composite a photo
"""
import argparse
import random
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from possessao.core.catalog import get_catalog
from possessao.core.entities import AGE_GROUPS, CAMERA_ORIENTATIONS, SEX_OPTIONS
from possessao.core.questions import TRAIT_TAGS, random_questions
from possessao.services.session_service import SessionController
from possessao.utils.config import settings
from possessao.utils.logger import get_logger

logger = get_logger(__name__)

YES_ANSWERS = {"s", "sim", "y", "yes"}


def display_results(controller: SessionController):
    """Print the ranked list and the chosen entity"""
    catalog = controller.catalog
    state = controller.state

    print(f"\n{'='*70}")
    print("RESULTADO")
    print(f"{'='*70}")

    print("\nTop candidates:")
    print(f"{'-'*70}")
    for i, candidate in enumerate(state.top_results, 1):
        entity = catalog.get(candidate.entity_id)
        traits = ", ".join(candidate.matched_traits) or "-"
        print(f"{i}. {entity.name:<12} {candidate.confidence:>5.0%}  matched: {traits}")

    result = state.result
    if result is None or result.is_empty:
        print("\nNo entity could be chosen (empty catalog).")
        return

    entity = catalog.get(result.entity_id)
    print(f"\n{'='*70}")
    print(f"{entity.name} ({entity.culture}) - {result.confidence:.0%}")
    print(f"{'='*70}")
    print(entity.description)
    if entity.traditions:
        print("\nTradições:")
        for step in entity.traditions:
            print(f"  {step}")

    if state.result_image:
        print(f"\nImagem: {state.result_image}")
    print(f"\n{'='*70}")
    print("Apenas entretenimento.")
    print(f"{'='*70}\n")


def ask_questions(controller: SessionController, quantity: int, perspective: str, rng: random.Random):
    """Interactive yes/no round"""
    for question in random_questions(quantity, rng):
        reply = input(f"{question.text(perspective)} [s/N] ").strip().lower()
        controller.set_answer(question.trait, reply in YES_ANSWERS)


def main():
    parser = argparse.ArgumentParser(
        description="Find the folkloric entity that matches a set of answers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Answer questions interactively
  python scripts/assess_cli.py --interactive

  # Answer from flags
  python scripts/assess_cli.py --yes mood_swings --yes unexplained_fatigue --sex Feminino

  # Composite a photo with the chosen entity
  python scripts/assess_cli.py --yes voice_shift --photo me.jpg --camera frontal

  # Skip scoring and force an entity
  python scripts/assess_cli.py --entity legiao --photo me.jpg
        """
    )

    parser.add_argument("--yes", action="append", default=[], choices=TRAIT_TAGS, metavar="TRAIT",
                       help="Trait answered 'yes' (repeatable)")
    parser.add_argument("--sex", choices=list(SEX_OPTIONS), default=None,
                       help="Declared sex")
    parser.add_argument("--age-group", choices=list(AGE_GROUPS), default=settings.DEFAULT_AGE_GROUP,
                       help=f"Age group (default: {settings.DEFAULT_AGE_GROUP})")
    parser.add_argument("--interactive", action="store_true",
                       help="Ask a random set of questions")
    parser.add_argument("--questions", type=int, default=settings.QUESTIONS_PER_SESSION,
                       help="Number of interactive questions")
    parser.add_argument("--third-person", action="store_true",
                       help="Ask the questions about someone else")
    parser.add_argument("--photo", type=str, default=None,
                       help="Photo to composite with the result")
    parser.add_argument("--camera", choices=list(CAMERA_ORIENTATIONS),
                       default=settings.DEFAULT_CAMERA_ORIENTATION,
                       help="Camera the photo was taken with")
    parser.add_argument("--entity", type=str, default=None,
                       help="Force this entity instead of scoring")
    parser.add_argument("--seed", type=int, default=None,
                       help="Seed for question order and tie-breaks")

    args = parser.parse_args()

    if args.photo and not Path(args.photo).exists():
        print(f"Error: Photo not found: {args.photo}")
        return 1

    catalog = get_catalog()
    if args.entity and args.entity not in catalog:
        print(f"Error: Unknown entity '{args.entity}'. Known: {', '.join(catalog.ids())}")
        return 1

    rng = random.Random(args.seed)
    controller = SessionController(catalog=catalog, rng=rng)
    controller.set_sex(args.sex)
    controller.set_age_group(args.age_group)
    if args.photo:
        controller.set_photo(str(Path(args.photo).resolve()), args.camera)

    for trait in args.yes:
        controller.set_answer(trait, True)

    try:
        if args.interactive:
            ask_questions(controller, args.questions, "third" if args.third_person else "first", rng)

        if args.entity:
            controller.select_manual_entity(args.entity)
        else:
            controller.generate_result()

        display_results(controller)
        return 0

    except KeyboardInterrupt:
        print("\nCancelled")
        return 130
    except Exception as e:
        print(f"\nError during assessment: {e}")
        logger.error(f"Assessment failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
