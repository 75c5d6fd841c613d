import argparse
import json
from typing import Any, Dict, Optional

import config
from node2doc.assembler import build_document
from node2doc.converter import write_document
from node2doc.elements import node_from_dict
from node2doc.logger import configure_logging


def _load_tree(input_json: str):
    with open(input_json, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        return [node_from_dict(item) for item in data]
    return node_from_dict(data)


def _json_default(value: Any):
    # image payloads are raw bytes in the model
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def render_docx(input_json: str, output_docx: str = config.DEFAULT_OUTPUT_DOCX):
    """
    Renders a JSON node tree into a .docx file.

    Args:
        input_json: Path to the JSON file holding the node tree.
        output_docx: Path to save the new .docx file.
    """
    print("Starting render workflow...")
    print(f"\nStep 1: Loading node tree from '{input_json}'...")
    try:
        tree = _load_tree(input_json)
        print("Successfully loaded node tree.")
    except Exception as e:
        print(f"Error while loading the node tree: {e}")
        return

    print("\nStep 2: Compiling node tree into a document model...")
    try:
        model = build_document(tree)
        print(f"Successfully compiled {len(model['sections'])} section(s).")
    except Exception as e:
        print(f"Error during compilation: {e}")
        return

    print(f"\nStep 3: Writing document model to '{output_docx}'...")
    try:
        write_document(model, output_docx)
        print(f"Successfully created new .docx file: '{output_docx}'")
    except Exception as e:
        print(f"Error during DOCX serialization: {e}")


def dump_model(input_json: str, output_json: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Compiles a JSON node tree and prints or saves the resulting document model.

    Args:
        input_json: Path to the JSON file holding the node tree.
        output_json: Optional path for the model; printed to stdout when omitted.
    """
    print(f"Step 1: Loading node tree from '{input_json}'...")
    try:
        tree = _load_tree(input_json)
    except Exception as e:
        print(f"Error while loading the node tree: {e}")
        return None

    print("\nStep 2: Compiling node tree into a document model...")
    try:
        model = build_document(tree)
    except Exception as e:
        print(f"Error during compilation: {e}")
        return None

    text = json.dumps(model, indent=2, ensure_ascii=False, default=_json_default)
    if output_json:
        with open(output_json, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"Document model saved to '{output_json}'")
    else:
        print(text)
    return model


def main():
    """
    Main function to handle command-line operations for rendering node trees.
    """
    parser = argparse.ArgumentParser(description="Render a JSON node tree into a .docx file.")
    parser.add_argument("--log-level", default=config.DEFAULT_LOG_LEVEL, help="Logging level name.")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    # --- Render Command ---
    parser_render = subparsers.add_parser("render", help="Render a node tree into a .docx file.")
    parser_render.add_argument("--input-json", required=True, help="Path to the JSON node tree.")
    parser_render.add_argument("--output-docx", default=config.DEFAULT_OUTPUT_DOCX, help="Path to save the .docx file.")

    # --- Model Command ---
    parser_model = subparsers.add_parser("model", help="Print the compiled document model as JSON.")
    parser_model.add_argument("--input-json", required=True, help="Path to the JSON node tree.")
    parser_model.add_argument("--output-json", help="Path to save the model instead of printing it.")

    args = parser.parse_args()
    configure_logging(args.log_level)

    if args.command == "render":
        render_docx(input_json=args.input_json, output_docx=args.output_docx)
    elif args.command == "model":
        dump_model(input_json=args.input_json, output_json=args.output_json)


if __name__ == "__main__":
    main()
