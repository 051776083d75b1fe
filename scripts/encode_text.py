"""Encode text with a stored tokenizer and print the model-ready ids."""

import argparse
from pathlib import Path
from typing import Union

from infer.data.registry import TokenizerRegistry
from infer.tokenizers import DecodingBpeTokenizer, WordPieceTokenizer
from infer.tokenizers.tokenizer_json import bpe_from_tokenizer_json, wordpiece_from_tokenizer_json


Tokenizer = Union[DecodingBpeTokenizer, WordPieceTokenizer]


def _load_tokenizer(args: argparse.Namespace) -> Tokenizer:
    registry = TokenizerRegistry()
    checkpoint_dir = Path(args.directory) if args.directory else registry.checkpoint_dir(args.name)
    if not checkpoint_dir.exists():
        raise RuntimeError(f"Tokenizer dir {checkpoint_dir} doesn't exist.")

    tokenizer_json = Path(checkpoint_dir, registry.TOKENIZER_JSON)
    vocab_json = Path(checkpoint_dir, registry.VOCAB_JSON)
    merges_txt = Path(checkpoint_dir, registry.MERGES_TXT)
    vocab_txt = Path(checkpoint_dir, registry.VOCAB_TXT)

    tokenizer: Tokenizer
    if args.kind == "wordpiece":
        if tokenizer_json.exists():
            tokenizer = wordpiece_from_tokenizer_json(tokenizer_json)
        else:
            tokenizer = WordPieceTokenizer.from_vocab_file(vocab_txt)
    elif tokenizer_json.exists():
        tokenizer = bpe_from_tokenizer_json(tokenizer_json, bos_token=args.bos_token, eos_token=args.eos_token)
    else:
        tokenizer = DecodingBpeTokenizer.from_files(
            vocab_json,
            merges_txt,
            bos_token=args.bos_token,
            eos_token=args.eos_token,
        )

    print(f"Loaded {args.kind} tokenizer from {checkpoint_dir} with vocab_size={tokenizer.vocab_size:,}")
    return tokenizer


def main(args: argparse.Namespace) -> None:
    """Entrypoint."""
    tokenizer = _load_tokenizer(args)

    encoded = tokenizer.encode(args.text, args.max_length)
    print(f"input_ids={encoded.input_ids.tolist()}")
    print(f"attention_mask={encoded.attention_mask.tolist()}")
    print(f"token_type_ids={encoded.token_type_ids.tolist()}")

    if isinstance(tokenizer, DecodingBpeTokenizer):
        decoded = tokenizer.decode(encoded.content_ids())
        print(f"{decoded=}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Encode text with a stored tokenizer.")
    parser.add_argument(
        "text",
        type=str,
        help="The text to encode",
    )
    parser.add_argument(
        "-k",
        "--kind",
        type=str,
        default="bpe",
        choices=["bpe", "wordpiece"],
        help="The tokenizer family",
    )
    parser.add_argument(
        "-n",
        "--name",
        type=str,
        default="clip",
        required=False,
        help="Name of a tokenizer under assets/tokenizers",
    )
    parser.add_argument(
        "-d",
        "--directory",
        type=str,
        default="",
        required=False,
        help="Explicit tokenizer directory; overrides --name",
    )
    parser.add_argument(
        "-m",
        "--max_length",
        type=int,
        default=77,
        required=False,
        help="The padded sequence length",
    )
    parser.add_argument(
        "--bos_token",
        type=str,
        default=None,
        required=False,
        help="Beginning-of-sequence token text (BPE only)",
    )
    parser.add_argument(
        "--eos_token",
        type=str,
        default=None,
        required=False,
        help="End-of-sequence token text (BPE only)",
    )
    args = parser.parse_args()

    main(args)
