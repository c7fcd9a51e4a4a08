"""
nipals_lab Examples Package
===========================

Runnable examples demonstrating NIPALS PCA on chromatographic peak-area
tables.

Examples
--------
batch_pca : module
    Simulated batch study: autoscaled NIPALS and per-batch score summary.
compare_methods : module
    NIPALS against the SVD reference for a range of iteration budgets.

Quick Start
-----------
Run any example directly from the command line:

    $ python -m examples.batch_pca
    $ python -m examples.compare_methods

Or import as modules:

    >>> from examples import batch_pca
    >>> output = batch_pca.main()
    >>> output["result"].variance_frame()

Learning Path
-------------
1. batch_pca - Understand scores, loadings and variance accounting
2. compare_methods - See how the iteration budget affects agreement with SVD
"""

__all__ = [
    "batch_pca",
    "compare_methods",
]


def list_examples():
    """
    List all available examples with descriptions.

    Returns
    -------
    dict
        Dictionary mapping example names to their descriptions.
    """
    return {
        "batch_pca": (
            "Simulated batch study. Autoscaled NIPALS on peak areas, "
            "variance accounting and mean scores per batch."
        ),
        "compare_methods": (
            "NIPALS against the SVD reference with 5, 30 and 200 inner "
            "iterations, plus tolerance-based early exit."
        ),
    }


def get_example_info(name):
    """
    Get detailed information about a specific example.

    Parameters
    ----------
    name : str
        Name of the example (without .py extension).

    Returns
    -------
    dict
        Dictionary with keys: 'description', 'features', 'runtime', 'complexity'
    """
    examples_info = {
        "batch_pca": {
            "description": "Compare production batches with PCA scores",
            "features": [
                "Synthetic peak-area table",
                "Autoscaled NIPALS decomposition",
                "Explained, residual and cumulative variance",
                "Mean scores by batch",
            ],
            "runtime": "<1 second",
            "complexity": "Beginner",
        },
        "compare_methods": {
            "description": "Check NIPALS convergence against SVD",
            "features": [
                "SVD reference solution",
                "Sign-oriented components",
                "Loading subspace gap per iteration budget",
                "Early exit with a tolerance",
            ],
            "runtime": "<1 second",
            "complexity": "Intermediate",
        },
    }

    if name not in examples_info:
        available = ", ".join(examples_info.keys())
        raise ValueError(
            f"Unknown example '{name}'. Available: {available}"
        )

    return examples_info[name]


def run_example(name, *args, **kwargs):
    """
    Dynamically import and run an example.

    Parameters
    ----------
    name : str
        Name of the example to run (without .py extension).
    *args, **kwargs
        Arguments to pass to the example's main() function.

    Returns
    -------
    result
        Return value from the example's main() function.

    Examples
    --------
    >>> from examples import run_example
    >>> output = run_example('batch_pca', n_batches=3)
    """
    import importlib

    valid_examples = list_examples().keys()
    if name not in valid_examples:
        raise ValueError(
            f"Unknown example '{name}'. Valid examples: {', '.join(valid_examples)}"
        )

    module = importlib.import_module(f"examples.{name}")

    if hasattr(module, "main"):
        return module.main(*args, **kwargs)
    else:
        raise AttributeError(
            f"Example '{name}' does not have a main() function"
        )


def print_examples_menu():
    """Print a formatted menu of all available examples."""
    print("=" * 70)
    print("nipals_lab Examples")
    print("=" * 70)
    print("\nAvailable examples:\n")

    for i, (name, desc) in enumerate(list_examples().items(), 1):
        info = get_example_info(name)
        print(f"{i}. {name}")
        print(f"   {desc}")
        print(f"   Complexity: {info['complexity']} | Runtime: {info['runtime']}")
        print()

    print("Usage:")
    print("  $ python -m examples.batch_pca")
    print("  or")
    print("  >>> from examples import run_example")
    print("  >>> run_example('batch_pca')")


def help():
    """Display help information about the examples package."""
    print(__doc__)
    print("\n")
    print_examples_menu()


__all__.extend([
    "list_examples",
    "get_example_info",
    "run_example",
    "print_examples_menu",
    "help",
])
