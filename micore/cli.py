"""Command-line interface for micore."""
import dataclasses
import logging

import click

from .config import RetrievalConfig
from .data import format_results, read_lut, write_results
from .retrieval import retrieve


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("lutfile", type=click.Path(exists=True, dir_okay=False))
@click.argument("surface_albedo", type=float)
@click.argument("ref1", type=float)
@click.argument("ref2", type=float)
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML file with retrieval settings.")
@click.option("--max-iter", type=int, default=None,
              help="Override the maximum number of iterations.")
@click.option("-o", "--output", type=click.Path(dir_okay=False),
              default="fm_results.txt", show_default=True,
              help="Results file.")
@click.option("--plot", "plot_path", type=click.Path(dir_okay=False), default=None,
              help="Save a reflectance-space diagram of the retrieval.")
@click.option("-v", "--verbose", is_flag=True, help="Trace every iteration.")
@click.option("-q", "--quiet", is_flag=True, help="Do not print the results.")
def main(lutfile, surface_albedo, ref1, ref2, config_path, max_iter, output,
         plot_path, verbose, quiet):
    """micore: retrieve cloud optical thickness (TAU) and effective radius
    (CDER) from two reflectances REF1 and REF2 using the lookup table
    LUTFILE. SURFACE_ALBEDO is added to the table reflectances.
    """
    logging.basicConfig(format="# %(name)s: %(message)s")
    logging.getLogger("micore").setLevel(logging.INFO if verbose else logging.WARNING)

    try:
        if config_path is not None:
            config, _ = RetrievalConfig.from_yaml(config_path)
        else:
            config = RetrievalConfig()
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    if max_iter is not None:
        try:
            config = dataclasses.replace(config, max_iter=max_iter)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--max-iter") from exc

    try:
        lut = read_lut(lutfile, surface_albedo=surface_albedo)
        result = retrieve(lut, (ref1, ref2), config=config, verbose=verbose)
    except ValueError as exc:
        raise click.ClickException(f"Retrieval failed: {exc}") from exc

    if not quiet:
        for line in format_results(result):
            click.echo(line)
    write_results(output, result)

    if plot_path is not None:
        import matplotlib

        matplotlib.use("Agg")
        from .plotting import save_diagram

        save_diagram(lut, result, plot_path)
        if not quiet:
            click.echo(f"Plot saved: {plot_path}")


if __name__ == "__main__":
    main()
