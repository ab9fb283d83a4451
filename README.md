# siegekit

Pieces an HTTP load generator is built from, as a plain Python library with
no third-party dependencies:

- `siegekit.url` – parse request lines such as `example.com/form POST a=1&b=2`
  into a `Url` (scheme, credentials, host, port, path, file, parameters,
  query, fragment, method and post data). A body written as `<file` is read
  from that file. Paths are percent-escaped by default (`url_escape`); pass
  `escape=False` to keep them as given.
- `siegekit.normalize` – resolve links found on a page against the page's
  own URL with `url_normalize` and `url_normalize_string`; `url_replace`
  replaces every occurrence of a substring.
- `siegekit.parser` – `parse_html` walks a page and returns the URLs a
  browser would fetch: images, scripts, stylesheets, meta refreshes and body
  backgrounds, each once, in the order first seen. Anchors and frames are not
  followed.
- `siegekit.response` – a `Response` that reads status and header lines one
  at a time: content type and charset, length, content and transfer
  encodings, connection and keep-alive, redirects, ETag, Last-Modified and
  `WWW-Authenticate` / `Proxy-Authenticate` challenges.
- `siegekit.md5` – an incremental `Md5` hash (`update`, `digest`,
  `hexdigest`, `copy`) plus `md5_buffer` and `md5_stream`.
- `siegekit.page` – `Page`, a growable text buffer.
- `siegekit.util` – helpers such as `parse_time` (`30s`, `5m`, `1h`; a bare
  number means minutes), `stristr`, `strmatch`, `substring`, `okay` and the
  `PosixRandom` generator.
- `siegekit.text` – `chomp`, `trim`, `ltrim`, `rtrim`, `empty`, `split` and
  `word_count`.

Python 3.10 or later is required.

## Examples

Parse a URL:

```python
from siegekit.url import Url

url = Url("example.com/search?q=siege")
print(url.display(True))   # http://example.com/search?q=siege
print(url.hostname, url.port, url.query)   # example.com 80 q=siege
url.dump()                 # every component, one per line
```

Find what a page loads:

```python
from siegekit.url import Url
from siegekit.parser import parse_html

base = Url("http://example.com/docs/")
html = '<img src="logo.png"><script src="/app.js"></script>'
for found in parse_html(base, html):
    print(found.absolute)
# http://example.com:80/docs/logo.png
# http://example.com:80/app.js
```

Read response headers as they arrive:

```python
from siegekit.response import Response

response = Response()
response.parse_status_line("HTTP/1.1 200 OK")
response.parse_content_type("content-type: text/html; charset=utf-8")
response.parse_content_length("content-length: 5120")
print(response.success())          # True
print(response.charset)            # utf-8
print(response.content_length)     # 5120
```

Hash data in pieces:

```python
from siegekit.md5 import Md5

digest = Md5(b"a")
digest.update(b"bc")
print(digest.hexdigest())   # 900150983cd24fb0d6963f7d28e17f72
```

## What it does not do

siegekit has no command and opens no network connections: it does not send
requests, run concurrent users, time a run or report statistics. It gives no
logging or colored console output either. It parses and builds the data such
a tool works with; driving the traffic is left to the program that uses it.

## Running the tests

Install the package together with its `test` extra, then run pytest from the
project directory.