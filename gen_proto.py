#!/usr/bin/env python3
"""
Script to generate the arcade message bindings from proto/ using grpc_tools.protoc
and the betterproto2 compiler plugin (pip install grpcio-tools betterproto2-compiler).
"""

import subprocess
import sys
from pathlib import Path

def run_protoc(proto_files, include_paths, output_dir):
    """Run protoc to generate betterproto2 Python code"""
    cmd = [
        sys.executable, "-m", "grpc_tools.protoc",
        f"--python_betterproto2_out={output_dir}",
    ]

    for include_path in include_paths:
        cmd.extend(["-I", include_path])

    cmd.extend(proto_files)

    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, capture_output=True, text=True)

    if result.returncode != 0:
        print(f"Error: {result.stderr}")
        return False

    print(f"Success: {result.stdout}")
    return True

def main():
    base_dir = Path(__file__).parent
    proto_dir = base_dir / "proto"
    output_dir = base_dir / "src" / "retrochain_sdk" / "rpc_client" / "protos"
    output_dir.mkdir(parents=True, exist_ok=True)

    print("Generating arcade proto...")
    arcade_proto_files = sorted(proto_dir.rglob("*.proto"))
    if not arcade_proto_files:
        print(f"No .proto files found under {proto_dir}")
        return 1

    success = run_protoc(
        [str(f) for f in arcade_proto_files],
        [str(proto_dir)],
        str(output_dir)
    )

    if not success:
        print("Failed to generate arcade proto")
        return 1

    print("Python proto generation completed successfully!")
    return 0

if __name__ == "__main__":
    sys.exit(main())
