import os
import shutil
import logging
import time
from enum import Enum
from pathlib import Path, PurePath

from .collection import CollectionResolver
from .content import load_entry
from .context import GenerationContext
from .errors import IoError, MissingFieldError, PathError, RenaticError
from .index import IndexKind, index_tree
from .location import resolve
from .minifier import MinificationLevel, minify_string
from .renderer import ContentRenderer, create_markdown_parser
from .settings import RenaticSettings


class GenerationState(Enum):
    IDLE = "idle"
    INDEXED = "indexed"
    DISPATCH = "dispatch"
    DONE = "done"


def is_hidden(child_path):
    """A path is hidden when any of its components starts with a dot."""
    return any(part.startswith('.') for part in PurePath(child_path).parts)


def is_ignored(child_path, ignore_paths):
    """Component-wise prefix match, so 'drafts/' matches 'drafts' and everything below it."""
    parts = PurePath(child_path).parts
    for ignore_path in ignore_paths:
        ignore_parts = PurePath(ignore_path).parts
        if ignore_parts and parts[:len(ignore_parts)] == ignore_parts:
            return True
    return False


class Renatic:
    """Generates a site from a source directory into an output directory."""

    def __init__(self, source_dir='.', output_dir='output', minification=MinificationLevel.SPEC_COMPLIANT,
                 verbose=False, log_file=None):
        self.source_dir = Path(source_dir).resolve()
        self.output_dir = Path(output_dir).resolve()
        self.minification = minification
        self.verbose = verbose
        self.log_file = log_file

        self.pages_rendered = 0
        self.files_copied = 0
        self.files_minified = 0
        self.collections_generated = 0
        self.nodes_skipped = 0
        self.state = GenerationState.IDLE

        self.setup_logging()

        self.context = None

    def setup_logging(self):
        """Set up logging configuration."""
        self.logger = logging.getLogger('Renatic')
        self.logger.setLevel(logging.DEBUG if self.verbose else logging.INFO)

        if not self.logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.DEBUG if self.verbose else logging.INFO)
            console_formatter = logging.Formatter('%(levelname)s: %(message)s')
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

            if self.log_file:
                log_dir = os.path.dirname(os.path.abspath(self.log_file))
                os.makedirs(log_dir, exist_ok=True)
                file_handler = logging.FileHandler(self.log_file)
                file_handler.setLevel(logging.DEBUG)
                file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
                file_handler.setFormatter(file_formatter)
                self.logger.addHandler(file_handler)

    def check_directories(self):
        """Refuse directory layouts where generating would destroy the source."""
        if not self.source_dir.is_dir():
            raise IoError(f"Source directory '{self.source_dir}' does not exist", stage='setup')
        if self.source_dir == self.output_dir:
            raise PathError("The source directory can't be the destination directory!", stage='setup')
        if self.source_dir.is_relative_to(self.output_dir):
            raise PathError(
                f"The output directory '{self.output_dir}' contains the source directory and would be removed",
                stage='setup',
            )

    def create_output_dir(self):
        """Remove the previous output and create an empty output directory."""
        try:
            if self.output_dir.exists():
                shutil.rmtree(self.output_dir)
            os.makedirs(self.output_dir, exist_ok=True)
        except (IOError, OSError) as e:
            raise IoError(f"Failed to prepare output directory '{self.output_dir}': {e}", stage='setup') from e

    def create_context(self):
        """Load the configuration and the template set shared by the whole run."""
        config = RenaticSettings(str(self.source_dir)).load_settings()
        renderer = ContentRenderer(
            self.source_dir,
            template_ext=config.template_ext,
            target_ext=config.target_ext,
            level=self.minification,
        )
        return GenerationContext(
            source_dir=self.source_dir,
            output_dir=self.output_dir,
            config=config,
            renderer=renderer,
            markdown=create_markdown_parser(),
            level=self.minification,
        )

    def generate(self):
        """Main generation process."""
        start_time = time.time()
        self.check_directories()
        self.context = self.create_context()
        self.create_output_dir()

        nodes = index_tree(self.source_dir)
        self.state = GenerationState.INDEXED

        for node in nodes:
            self.dispatch(node)
        self.state = GenerationState.DONE

        total_time = time.time() - start_time
        self.logger.info(f"Generation successfully completed in {total_time:.3f} seconds.")
        self.logger.info(f"Total pages rendered: {self.pages_rendered}")
        self.logger.info(f"Total collections generated: {self.collections_generated}")
        self.logger.info(f"Total files minified: {self.files_minified}")
        self.logger.info(f"Total files copied: {self.files_copied}")
        if self.nodes_skipped:
            self.logger.info(f"Total items skipped: {self.nodes_skipped}")

    def should_skip(self, node, child_path):
        config = self.context.config
        if self.output_dir == node.path or self.output_dir in node.path.parents:
            self.logger.debug(f"Skip '{child_path}' inside the output directory")
            return True
        if config.ignore_hidden and is_hidden(child_path):
            self.logger.debug(f"Skip hidden '{child_path}'")
            return True
        if is_ignored(child_path, config.ignore_paths):
            self.logger.debug(f"Skip ignored '{child_path}'")
            return True
        return False

    def destination(self, node, child_path):
        """Output path of a node, as used by the duplicate output check."""
        config = self.context.config
        if node.kind is IndexKind.FILE:
            ext = node.path.suffix[1:].lower()
            if ext in (config.content_ext, config.template_ext):
                return resolve(node.path, self.source_dir, self.output_dir, config.target_ext).target_path
        return self.output_dir / child_path

    def already_generated(self, path, child_path):
        # TODO: a conflict between two collections targeting the same page is
        # only reported as a warning; decide whether it should fail the run.
        self.logger.warning(
            f"The file '{child_path}' was skipped because '{path}' was already generated in an earlier stage! "
            f"Make sure you don't have duplicate files or configure to ignore them"
        )
        self.nodes_skipped += 1

    def dispatch(self, node):
        """Generate the output of one indexed node."""
        self.state = GenerationState.DISPATCH
        child_path = node.path.relative_to(self.source_dir)
        if self.should_skip(node, child_path):
            self.nodes_skipped += 1
            return

        out_path = self.destination(node, child_path)
        if out_path.exists():
            if node.kind is IndexKind.DIRECTORY and out_path.is_dir():
                self.logger.debug(f"Directory '{child_path}' already exists")
                return
            self.already_generated(out_path, child_path)
            return

        if node.kind is IndexKind.DIRECTORY:
            self.logger.debug(f"Create directory '{out_path}'")
            self.make_dir(out_path)
        elif node.kind is IndexKind.COLLECTION:
            self.generate_collection(node.path, child_path, out_path)
        else:
            self.generate_file(node.path, child_path, out_path)

    def generate_file(self, path, child_path, out_path):
        config = self.context.config
        ext = path.suffix[1:].lower()

        if ext == config.content_ext:
            self.generate_content(path, child_path)
        elif ext == config.template_ext:
            self.logger.debug(f"Generate template without source '{child_path}'")
            html = self.context.renderer.render(child_path.as_posix())
            self.write_text(out_path, html)
            self.pages_rendered += 1
        elif ext in config.minify_ext:
            self.logger.debug(f"Minify & copy non-template file '{child_path}'")
            contents = self.read_text(path)
            self.write_text(out_path, minify_string(contents, self.context.level, ext))
            self.files_minified += 1
        else:
            self.logger.debug(f"Copy file '{child_path}'")
            try:
                shutil.copy2(path, out_path)
            except (IOError, OSError) as e:
                raise IoError(f"Failed to copy '{path}' to '{out_path}': {e}", stage='write') from e
            self.files_copied += 1

    def generate_content(self, path, child_path):
        """Render a standalone content file through the template it declares."""
        ctx = self.context
        location = resolve(path, self.source_dir, self.output_dir, ctx.config.target_ext)
        entry = load_entry(location, ctx.markdown)
        if entry.metadata.template is None:
            raise MissingFieldError(f"Unspecified required template option for '{child_path}'", stage='render')
        self.logger.debug(f"Generate content for '{child_path}'")
        try:
            html = ctx.renderer.render(entry.metadata.template, entry)
        except RenaticError as e:
            raise e.wrap(
                f"Failed to generate content for '{child_path}' using template '{entry.metadata.template}'"
            ) from e
        self.write_text(location.target_path, html)
        self.pages_rendered += 1

    def generate_collection(self, path, child_path, out_path):
        self.logger.info(f"Generating collection '{child_path}'")
        try:
            outputs = CollectionResolver(self.context).resolve(path)
        except RenaticError as e:
            raise e.wrap(f"Failed to generate collection '{child_path}'") from e

        self.make_dir(out_path)
        for output in outputs:
            if output.path.exists():
                self.already_generated(output.path, output.source)
                continue
            self.write_text(output.path, output.text)
            self.pages_rendered += 1
        self.collections_generated += 1

    def make_dir(self, path):
        try:
            os.makedirs(path, exist_ok=True)
        except (IOError, OSError) as e:
            raise IoError(f"Failed to create directory '{path}': {e}", stage='write') from e

    def read_text(self, path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except (IOError, OSError, UnicodeDecodeError) as e:
            raise IoError(f"Failed to read file '{path}': {e}", stage='read') from e

    def write_text(self, path, text):
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(text)
        except (IOError, OSError) as e:
            raise IoError(f"Failed to write generated content to '{path}': {e}", stage='write') from e
        self.logger.debug(f"Generated: {path}")
