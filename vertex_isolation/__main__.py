import argparse
import logging

from vertex_isolation.experiment import list_bots, run_match


def main(argv=None):
    # Parse command-line arguments
    parser = argparse.ArgumentParser(description="Play vertex isolation matches between bots.")
    parser.add_argument("--bot1", type=str, default="mcts", help=f"First bot ({', '.join(list_bots())})")
    parser.add_argument("--bot2", type=str, default="greedy", help="Second bot")
    parser.add_argument("--difficulty1", type=str, default="medium", help="Difficulty of the first bot")
    parser.add_argument("--difficulty2", type=str, default="medium", help="Difficulty of the second bot")
    parser.add_argument("--radius", type=int, default=3, help="Board radius")
    parser.add_argument("--games", type=int, default=1, help="Number of games to play")
    parser.add_argument("--max_simulations", type=int, default=None, help="Override MCTS simulations per move")
    parser.add_argument("--time_ms", type=float, default=None, help="Override MCTS thinking time per move")
    parser.add_argument("--random_seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--table_dir", type=str, default=None, help="Append results to a CSV table in this directory")
    parser.add_argument("--verbose", action="store_true", help="Log bot reasoning")
    args_cli = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args_cli.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides = {}
    if args_cli.max_simulations is not None:
        overrides['max_simulations'] = args_cli.max_simulations
    if args_cli.time_ms is not None:
        overrides['max_thinking_time_ms'] = args_cli.time_ms

    wins = {}
    for game in range(args_cli.games):
        config = {
            'bot1': args_cli.bot1,
            'bot2': args_cli.bot2,
            'difficulty1': args_cli.difficulty1,
            'difficulty2': args_cli.difficulty2,
            'grid_radius': args_cli.radius,
            'mcts_overrides': overrides,
            'verbose': args_cli.verbose,
            'record_table': args_cli.table_dir is not None,
            'table_dir': args_cli.table_dir or 'results',
        }
        if args_cli.random_seed is not None:
            config['random_seed'] = args_cli.random_seed + game
        result = run_match(config)
        wins[result.winner] = wins.get(result.winner, 0) + 1

    logging.getLogger(__name__).info("Wins after %d games: %s", args_cli.games, wins)
    return wins


if __name__ == "__main__":
    main()
