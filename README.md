# snpsim

`snpsim` is a set of tools for case-control SNP genotype data. It can read a
simulation control file, load phased reference haplotypes, fit a
logit-penetrance disease model, and write simulated haplotypes in linkage,
genotype or phased format. It can also compute allelic chi-squared statistics,
load and generate case/control genotype datasets, and work out the size
parameters of a genetic-algorithm population.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Control files (`snpsim.config`)

`read_control_file(path)` reads a control file and `parse_control(lines)`
parses its lines. Both return a frozen `ControlConfig`. Any missing, malformed
or inconsistent setting raises `ConfigError`, a subclass of `ValueError`.

The file holds one setting per line:

1. The prefix and suffix of the phased input files. The chromosome number goes
   between them, so `data/chr` and `.phased` name `data/chr1.phased` and so on.
2. The number of phased autosomes and the number of phased X chromosomes. Each
   may be at most 1000.
3. An output flag (non-zero means write output), followed by the format:
   `linkage`, `genotype` or `phased`. Case does not matter.
4. The window size. It must be at least 2, and it defaults to 5 when the line
   holds no number.
5. The numbers of female cases, male cases, female controls and male controls.
   Together they may be at most 20000.
6. The number of disease loci (0 to 23), followed by a regional flag (0 or 1).
   With 0 loci, the case counts are set to zero (population sampling).

If there is at least one disease locus, these lines follow:

- The prevalence, a value strictly between 0 and 1.
- One line per locus with these fields: chromosome, 1-based position, disease
  allele (0 or 1), GRR, and GRR2. GRR2 may be a number, `M` (meaning GRR²) or
  `D` (meaning GRR). Regional runs add a start and an end position.
- Any number of `Inter2 <DL1> <DL2> <e11> <e12> <e21> <e22>` lines that set
  pairwise interactions. There may be at most 256 of them. Other lines are
  skipped, and a blank line ends the list.

`chromosome_order(disease_chromosomes)` returns the disease chromosomes first,
followed by the remaining chromosomes 1 to 23 in ascending order. The other
stages use this order.

## Phased data (`snpsim.phased`)

- `read_phased_file(path, n_hap)` reads `n_hap` lines of 0/1 alleles.
- `allele_frequencies(haplotypes)` gives the frequency of allele 0 at each SNP.
- `load_phased_data(config, order)` loads a `ChromosomeData` for each entry of
  `order`. In regional runs it gives `None` for the non-disease chromosomes.

Bad input raises `DataError`. This happens when a file can't be opened, has
short lines, has a disease locus or end position out of range, or has more
than 100000 SNPs.

## Disease model (`snpsim.model`)

`build_model(config, chromosomes, order)` returns a `DiseaseModel`. It fits the
per-locus coefficients `beta1` and `beta2` from the risk ratios, adds any
interaction terms, and finds the intercept `beta0` by bisection on the
prevalence. It then stores the cumulative genotype distributions for case and
control females and males. `DiseaseModel.report()` returns the model summary
as text.

The helper functions are `index_to_genotypes`, `genotype_frequency`,
`genotype_frequency_x`, `genotype_frequency_x_male` and `prevalence`.

```python
from snpsim.config import chromosome_order, read_control_file
from snpsim.model import build_model
from snpsim.phased import load_phased_data

config = read_control_file("control.txt")
order = chromosome_order(locus.chromosome for locus in config.loci)
chromosomes = load_phased_data(config, order)
if config.n_loci:
    print(build_model(config, chromosomes, order).report())
```

## Writing output (`snpsim.output`)

- `format_chromosome(config, chromosome, haplotypes, start, end)` renders
  positions `start`..`end` in the configured format.
- `remove_old_outputs(directory, order)` deletes existing `chr<N>.dat` and
  `chr<N>.dat.gz` files.
- `write_outputs(config, order, chromosomes, simulated, directory)` writes each
  chromosome to `chr<N>.dat.gz` using Python's `gzip` module. It returns the
  paths written.

## Association statistics (`snpsim.analysis`)

`allelic_chisq(chromosome, haplotypes, n_case_f, n_case_m, n_cont_f, n_cont_m)`
gives the 1-df allelic chi-squared statistic for each SNP. On the X
chromosome, the second haplotype of each male is not counted.
`genome_chisq(order, simulated, ...)` joins the results for all chromosomes.

## Genotype datasets (`snpsim.genotype_data`, `snpsim.synthetic`)

- `load_yang_data(directory, yang_range)` reads the `case_genotypes*` and
  `anticase_genotypes*` files (`.dat` or `.sln`). Each line holds one
  individual. With `yang_range`, genotypes are coded 1 to 3 instead of 0 to 2.
  It returns a `GenotypeDataset` with per-SNP `SnpData` totals.
- `generate_synthetic_data(rng)` builds a 5000 × 500 dataset with a fixed
  interacting pair of SNPs (0 and 150). It uses a `random.Random`.
- `snpsim.synthetic.generate(config, rng)` builds a dataset from a
  `GeneratorConfig`. `fill_selected` plants the selected SNPs' joint genotypes
  in the cases. `write_genotype_files(dataset, directory)` writes
  `case_genotypes.dat` and `anticase_genotypes.dat` with one SNP per line.

## Genetic-algorithm population sizing (`snpsim.population`)

`population_parameters(config, number_of_snps, chromosome_length,
number_of_genotypes)` derives the population size from a `GAConfig`, along
with the crossover, mutation, trap, vibration and elitism counts.
`elitism_group_size(elitism_rate, size)` gives the elitism group size, which
is always even and at least two.

## Match probability calculator

```
snpsim-probability <n> <m> <f> <p>
```

This prints ` Result: <value>` from `snpsim.probability.match_probability`.
The argument `p` is a fraction of `n`.

## What the package does not do

- There is no haplotype sampling step and no command that runs a whole
  simulation. The package reads the inputs, fits the disease model and writes
  output, but you must supply the simulated haplotypes passed to
  `write_outputs`.
- The disease model report is returned as text and is not saved to a file.
- For the genetic algorithm, the package only sizes the population. It has no
  selection operators, no evolution loop and no fitness evaluation.