# run.py
import argparse
import sys

from sentiprep import config, get_device, load_config, logger
from sentiprep.builder import build_datasets, resolve_word_vectors_path
from sentiprep.dataset import CLASSES, get_dataloaders
from sentiprep.embeddings import load_word_vectors
from sentiprep.evaluate import collect_predictions, confusion_matrix_plot, evaluate_model
from sentiprep.model import build_model
from sentiprep.predict import predict_review
from sentiprep.train import load_checkpoint, train_model


class _ArgumentParser(argparse.ArgumentParser):
    """Prints usage and exits with status 1 on bad input."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(description="IMDB word2vec sentiment dataset builder")
    parser.add_argument("--config", type=str, default=None, help="JSON/YAML file with default values")
    subparsers = parser.add_subparsers(dest="command")

    # Build presaved datasets
    build_parser_ = subparsers.add_parser("build", help="Download, extract and presave the IMDB batches")
    build_parser_.add_argument("-b", "--batch", type=int, default=None, help="BatchSize")
    build_parser_.add_argument("-l", "--length", type=int, default=None, help="Truncate max review length to")

    # Train
    train_parser = subparsers.add_parser("train", help="Train the LSTM on presaved batches")
    train_parser.add_argument("--epochs", type=int, default=None)
    train_parser.add_argument("--lr", type=float, default=None)

    # Evaluate
    subparsers.add_parser("evaluate", help="Evaluate the best checkpoint on the test batches")

    # Predict
    predict_parser = subparsers.add_parser("predict", help="Classify a single review")
    predict_parser.add_argument("--text", type=str, required=True)

    # Plot confusion matrix
    plot_parser = subparsers.add_parser("plot", help="Plot confusion matrix")
    plot_parser.add_argument("--out", type=str, default="confusion_matrix.png")

    return parser


def _pick(value, cfg, key, default):
    return value if value is not None else cfg.get(key, default)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config(args.config)

    if args.command == "build":
        build_datasets(
            batch_size=_pick(args.batch, cfg, "batch_size", config.DEFAULT_BATCH_SIZE),
            max_length=_pick(args.length, cfg, "max_length", config.DEFAULT_MAX_LENGTH),
            word_vectors_path=cfg.get("word_vectors_path"),
        )
        return

    if args.command is None:
        parser.print_help()
        return

    device = get_device()
    loaders = get_dataloaders(config.TRAIN_DIR, config.TEST_DIR, seed=config.SEED)
    checkpoint = config.MODELS_DIR / config.MODEL_FILENAME

    if args.command == "train":
        input_size = next(iter(loaders["test"]))["features"].size(-1)
        model = build_model(input_size=input_size, num_classes=len(CLASSES)).to(device)
        train_cfg = {
            "epochs": _pick(args.epochs, cfg, "epochs", config.DEFAULT_EPOCHS),
            "lr": _pick(args.lr, cfg, "lr", config.DEFAULT_LR),
            "weight_decay": config.DEFAULT_WEIGHT_DECAY,
        }
        train_model(model, loaders, device, train_cfg)
        return

    model = load_checkpoint(checkpoint, device)

    if args.command == "evaluate":
        metrics = evaluate_model(model, loaders["test"], device)
        logger.info(f"[Test] Loss: {metrics['loss']:.4f}, Accuracy: {metrics['acc']:.2f}%")

    elif args.command == "predict":
        word_vectors = load_word_vectors(resolve_word_vectors_path(cfg.get("word_vectors_path")))
        max_length = cfg.get("max_length", config.DEFAULT_MAX_LENGTH)
        result = predict_review(model, args.text, word_vectors, device, max_length=max_length)
        logger.info(f"[Predict] Class: {result['pred_class']} | Probabilities: {result['probs']}")

    elif args.command == "plot":
        y_true, y_pred = collect_predictions(model, loaders["test"], device)
        confusion_matrix_plot(y_true, y_pred, CLASSES, out_path=config.LOGS_DIR / args.out)


if __name__ == "__main__":
    main()
