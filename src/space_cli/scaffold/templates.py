"""Project templates for ``space new``."""

from string import Template


CARGO_TOML_TEMPLATE = Template('''[package]
name = "$name"
version = "0.1.0"
edition = "2021"

[lib]
crate-type = ["cdylib"]

[dependencies]
space-lib = "0.5"
serde = { version = "1.0", features = ["derive"] }

[profile.release]
lto = true
strip = true
opt-level = "z"
''')

LIB_RS_TEMPLATE = Template('''use space_lib::{space, Result};
use serde::{Serialize, Deserialize};

#[derive(Deserialize)]
struct Input {
    value: u64,
    name: String,
}

#[derive(Serialize)]
struct Output {
    value: u64,
    name: String,
}

#[space]
fn main(input: Input) -> Result<Output> {
    let output = Output {
        value: input.value * 2,
        name: input.name.chars().rev().collect(),
    };
    Ok(output)
}
''')

CARGO_CONFIG_TEMPLATE = Template('''[build]
target = "wasm32-wasi"
''')

BUILD_ZIG_TEMPLATE = Template('''const std = @import("std");

pub fn build(b: *std.build.Builder) void {
    const lib = b.addSharedLibrary("$name", "src/main.zig", .unversioned);
    lib.setTarget(.{ .cpu_arch = .wasm32, .os_tag = .wasi });
    lib.setBuildMode(.ReleaseFast);
    lib.install();
}
''')

MAIN_ZIG_TEMPLATE = Template('''const std = @import("std");

export fn main(value: u64) u64 {
    return value * 2;
}
''')
