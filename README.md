# hrtfkit

Tools for head-related transfer function (HRTF) sets that follow the layout
of SOFA `SimpleFreeFieldHRIR` data. A set holds measurement positions, impulse
responses, delays and a sampling rate. The package can:

- validate conventions, dimensions and positions (`hrtfkit.check.check`)
- convert between cartesian and spherical coordinates
  (`hrtfkit.spherical.to_cartesian`, `hrtfkit.spherical.to_spherical`,
  `hrtfkit.coords.c2s`, `hrtfkit.coords.s2c`)
- resample every impulse response to a new rate
  (`hrtfkit.processing.resample`)
- normalise loudness against the frontal filter
  (`hrtfkit.processing.normalize_loudness`)
- trim quiet leading and trailing samples and turn the trimmed lead into
  per-filter delays (`hrtfkit.processing.minphase`)
- find the nearest measurement with a k-d tree (`hrtfkit.lookup.Lookup`,
  `hrtfkit.kdtree.KdTree`)
- search for neighbours and interpolate filters by inverse distance
  (`hrtfkit.neighbors.Neighborhood`, `hrtfkit.interpolate.interpolate`)

It uses only the standard library.

## Installation

```
pip install hrtfkit
```

## The data model

`hrtfkit.hrtf.Hrtf` is a dataclass with the AES69 dimensions `I`, `C`, `R`,
`E`, `N` and `M`, plus the variables `listener_position`, `receiver_position`,
`source_position`, `emitter_position`, `listener_up`, `listener_view`,
`data_ir`, `data_sampling_rate` and `data_delay`. Each variable is a
`hrtfkit.hrtf.SofaArray`, which holds a flat list of `values` and a dict of
`attributes` such as `"Type"` or `"DIMENSION_LIST"`. The global attributes
of the set are in `Hrtf.attributes`. `Hrtf.variables` holds any extra
variables.

## Usage

`EasyHrtf.open` checks a set, resamples it, can normalise it, converts its
positions to cartesian and builds the lookup and neighbour indexes:

```python
from hrtfkit.easy import EasyHrtf

with EasyHrtf.open(hrtf, 48000, True, 0.5, 0.01) as easy:
    print(easy.filter_length())
    left, right, delay_left, delay_right = easy.get_filter_float(1.0, 0.0, 0.0)
```

The two delays of `get_filter_float` are in seconds.
`get_filter_float_nointerp` returns the filters of the nearest measurement
without interpolating them. `get_filter_short` returns the filters scaled to
16-bit integers, with the delays in samples.

If a set is unsupported, `check` and `EasyHrtf.open` raise
`hrtfkit.hrtf.SofaError`. Its `code` is a `hrtfkit.hrtf.ErrorCode` that names
the problem, for example `INVALID_DIMENSIONS` or `INVALID_RECEIVER_POSITIONS`.
Some sets have their receivers swapped by old API versions. `check` still
accepts these, logs a warning and returns it in a list.

### Sharing opened sets

`hrtfkit.cache.HrtfCache` shares opened sets by file name and sampling rate
and counts references to them:

```python
from hrtfkit.cache import HrtfCache

cache = HrtfCache()
easy = cache.store(easy, "subject.sofa", 48000)
same = cache.lookup("subject.sofa", 48000)
cache.release(same)
```

The file name is only a key. The cache never reads the file.

### Resampling streams

`hrtfkit.resampler.Resampler` is a windowed-sinc sample-rate converter that
can also be used by itself:

```python
from hrtfkit.resampler import Resampler

resampler = Resampler(1, 44100, 48000, 10)
consumed, output = resampler.process_float(0, samples, 512)
```

## What it does not do

The package reads no files. It has no SOFA or HDF5 reader and no command-line
program. You build the `Hrtf` object yourself, or from a reader of your own.

## Running the tests

```
pip install -e ".[test]"
pytest
```