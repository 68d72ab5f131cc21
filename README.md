# contextforge

`contextforge` collects a code repository, a local directory or a web page into a
single Markdown file, ready to be pasted into a prompt or read as a whole.

Inputs it understands:

- **GitHub repositories**: `https://github.com/owner/repo`, or the shorthand
  `github/owner/repo`. The default branch is downloaded as an archive and every text
  file is written out, together with a directory tree.
- **Local directories**: `./path`, `../path` or `/absolute/path`, handled the same way.
- **Other `http(s)` URLs**: the page is fetched, cleared of scripts, navigation, forms,
  comment and social-media blocks and similar clutter, converted to Markdown, and its
  images are saved locally.

Query strings and fragments are dropped from URLs before they are processed (for
`youtube.com` links the `v` parameter is kept).

All output goes to a `context/` directory under the current working directory. Images
from web pages go to `context/images/`; that directory is removed again when it ends up
empty.

## Installation

```
pip install contextforge
```

## Command line

Process one input:

```
contextforge https://github.com/owner/repo
contextforge ./my-project
contextforge https://example.com/some/article
```

Process many inputs listed one per line in a file (blank lines are skipped):

```
contextforge -f urls.txt
```

Options:

| Option | Meaning |
| --- | --- |
| `-f`, `--file PATH` | File holding a list of URLs or paths to process |
| `-t`, `--threads N` | Number of inputs processed at once (default 10) |
| `-i`, `--ignore PATTERNS` | Extra ignore patterns, comma separated, e.g. `tests,docs`; may be repeated |
| `--log` | Log-style output instead of the live status display |
| `-v`, `--version` | Print the version |

Giving both a URL and `--file`, or neither, is an error and exits with status 1.

Without `--log`, a two-line status display with a progress bar is shown while the work
runs, followed by any errors. With `--log`, progress is reported through the
`contextforge` logger instead.

Files that are always skipped include version-control metadata, lock files, archives,
images, audio and video, fonts, compiled objects and package files. Any file whose first
512 bytes look binary is skipped too. Each `--ignore` pattern is a shell-style pattern
matched against a file's name and against its path below the root.

Set the `GH_TOKEN` environment variable to download private GitHub repositories.

### Web server

```
contextforge serve
```

starts a server on port 8080 with these endpoints:

- `POST /generate` with a JSON body `{"url": "...", "ignore": ["tests"]}` clears earlier
  output, builds a context file and returns `{"content": "..."}`.
- `GET /load` returns `{"content": "..."}` for the current context file, or empty
  content if there is none.
- `GET /download` returns the Markdown file, or a zip holding it and its `images/`
  when images were saved.
- `POST /clear` removes the generated Markdown files and images.

Other paths are served as files from a `web/` directory inside the installed package.

## Output format

A repository or directory produces a file such as `context/gh-owner_repo.md` or
`context/dir-my_project.md`:

````
# Source Code Context

Generated on: 2024-01-01T12:00:00Z

## Repository Overview
- Total Files: 2
- Total Size: 1234 bytes

## Directory Structure
```
README.md
src/
  main.py

```

## File Contents


### File: README.md

```markdown
...
```
````

Web pages are written to `context/web-<name>.md`, beginning with
`# Webpage Context: <title>` and `Source: <url>`; the page's host stands in for the
title when it has none.

## Using it as a library

```python
from contextforge.handler import handler

errors = handler(["./my-project"], ["tests"], 4, True)
```

`handler` returns the list of error messages, one per failed input. The pieces can
also be used on their own:

- `contextforge.source.Processor` with `ProcessorConfig(output_path, additional_ignores)`:
  `collect(root)`, `process_directory(path)` and `process_github_url(url)`.
- `contextforge.web.process_web_content(url, output_path)`.
- `contextforge.markdown_convert.html_to_markdown(html)`.
- `contextforge.handler.clean_url`, `classify_url` and `get_out_file_name`.
- `contextforge.ignores.IgnorePatterns` and `is_binary`.
- `contextforge.dictionary.Dictionary`, a `dict` whose `unwind_*` methods read values
  along a path of nested keys.

## Limitations

- YouTube links are recognised but not processed: no transcript is fetched, and each
  such input is reported as failed with "video transcripts are not supported".
- The package ships no page for the web server's `/` route; without a
  `web/index.html` in the package directory that route answers with an error, while the
  JSON endpoints work as described.
- The `serve` command takes no options; the port is always 8080.